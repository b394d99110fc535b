"""Basic import tests for temporal module."""


def test_temporal_imports():
    """Test that temporal modules can be imported successfully."""
    from temporal_mcp.temporal import TableNameResolver
    from temporal_mcp.temporal import TemporalClauseBuilder
    from temporal_mcp.temporal import TemporalManager
    from temporal_mcp.temporal import TemporalQuery

    assert TableNameResolver is not None
    assert TemporalClauseBuilder is not None
    assert TemporalManager is not None
    assert TemporalQuery is not None


def test_temporal_manager_init():
    """Test that TemporalManager can be instantiated."""
    from unittest.mock import Mock

    from temporal_mcp.temporal import TemporalManager

    mock_driver = Mock()
    manager = TemporalManager(mock_driver)

    assert manager is not None
    assert manager.sql_driver == mock_driver


def test_temporal_query_init():
    """Test that TemporalQuery can be instantiated."""
    from unittest.mock import Mock

    from temporal_mcp.temporal import TemporalClauseBuilder
    from temporal_mcp.temporal import TemporalQuery

    mock_driver = Mock()
    mock_resolver = Mock()
    query = TemporalQuery(mock_driver, mock_resolver)

    assert query.sql_driver == mock_driver
    assert query.resolver == mock_resolver
    assert isinstance(query.builder, TemporalClauseBuilder)
