"""
Tests for DataTableController covering flat, tree and grouped tables.
"""
import pytest
import pyarrow as pa
from datatable_engine.config import DataTableConfig
from datatable_engine.controller import DataTableController
from datatable_engine.errors import StructuralError
from datatable_engine.types.table_spec import TableOptions

ROWSPAN_HEADERS = [
    {"text": "Monitor", "value": "groupId"},
    {"text": "State", "value": "monitorState"},
    {"text": "Servers", "value": "id"},
    {"text": "Address", "value": "serverAddress"},
    {"text": "Port", "value": "serverPort"},
    {"text": "Connections", "value": "serverConnections"},
    {"text": "State", "value": "serverState"},
    {"text": "GTID", "value": "gtid"},
    {"text": "Services", "value": "serviceIds"},
]

ROWSPAN_DATA = [
    {
        "id": "row_server_2",
        "serverAddress": "127.0.0.1",
        "serverPort": 4002,
        "serverConnections": 0,
        "serverState": "Slave, Running",
        "serviceIds": ["RCR-Router", "RCR-Writer", "RWS-Router"],
        "gtid": "0-1000-9",
        "groupId": "Monitor",
        "monitorState": "Running",
    },
    {
        "id": "row_server_1",
        "serverAddress": "127.0.0.1",
        "serverPort": 4001,
        "serverConnections": 0,
        "serverState": "Master, Running",
        "serviceIds": ["RCR-Router", "RCR-Writer", "RWS-Router"],
        "gtid": "0-1000-9",
        "groupId": "Monitor",
        "monitorState": "Running",
    },
    {
        "id": "row_server_3",
        "serverAddress": "127.0.0.1",
        "serverPort": 4003,
        "serverConnections": 0,
        "serverState": "Down",
        "serviceIds": "No services",
        "gtid": None,
        "groupId": "monitor-test",
        "monitorState": "Running",
    },
]

TREE_DATA = {
    "root_node": {
        "node_child": {"grand_child": {"great_grand_child": "great_grand_child"}},
        "node_child_1": "node_child_1 value",
    },
}


@pytest.fixture
def controller() -> DataTableController:
    return DataTableController(
        columns=[{"text": "Variable", "value": "id"}, {"text": "Value", "value": "value"}],
        data=[
            {"id": "Item 0", "value": None},
            {"id": "Item 1"},
            {"id": "Item 2", "value": "value of item 2"},
        ],
        config=DataTableConfig(),
    )


@pytest.fixture
def grouped() -> DataTableController:
    events = []
    signals = []
    controller = DataTableController(
        columns=ROWSPAN_HEADERS,
        data=ROWSPAN_DATA,
        options=TableOptions(group_column_count=2),
        config=DataTableConfig(),
        on_cell_hover=events.append,
        on_highlight=signals.extend,
    )
    controller.events = events
    controller.signals = signals
    return controller


def row_ids(controller):
    return [row.id for row in controller.table_rows]


def test_processing_data_with_keep_primitive_value(controller):
    assert controller.options.keep_primitive_value is False
    processed = controller.processed_data
    assert processed[0]["value"] == "null"
    assert processed[1]["value"] == "undefined"

    controller.set_options(keep_primitive_value=True)
    processed = controller.processed_data
    assert processed[0]["value"] is None
    assert "value" not in processed[1]


def test_tree_mode_initial_render(controller):
    assert controller.options.is_tree is False

    controller.set_data(TREE_DATA, is_tree=True)

    assert controller.options.is_tree is True
    assert controller.has_valid_child is True
    assert len(controller.table_rows) == 1
    assert controller.table_rows[0].id == "root_node"
    assert controller.table_rows[0].expanded is False


def test_editable_cell_expands_all_nodes(controller):
    controller.set_data(TREE_DATA, is_tree=True)

    controller.set_options(editable_cell=True)
    assert row_ids(controller) == [
        "root_node", "node_child", "grand_child", "great_grand_child", "node_child_1"
    ]

    controller.set_options(editable_cell=False)
    assert row_ids(controller) == ["root_node"]


def test_toggle_collapses_node_while_all_expanded(controller):
    controller.set_data(TREE_DATA, is_tree=True)
    controller.toggle_node("root_node")
    controller.toggle_node("node_child")

    controller.set_options(editable_cell=True)
    assert controller.toggle_node("root_node") is False
    assert row_ids(controller) == ["root_node"]

    controller.set_options(editable_cell=False)
    assert row_ids(controller) == ["root_node", "node_child", "grand_child", "node_child_1"]


def test_toggle_node_expand_and_collapse(controller):
    controller.set_data(TREE_DATA, is_tree=True)

    controller.toggle_node(controller.table_rows[0])
    assert controller.table_rows[0].expanded is True
    assert row_ids(controller) == ["root_node", "node_child", "node_child_1"]

    controller.toggle_node(controller.table_rows[1])
    assert controller.table_rows[1].expanded is True
    assert row_ids(controller) == ["root_node", "node_child", "grand_child", "node_child_1"]

    controller.toggle_node(controller.table_rows[0])
    assert controller.table_rows[0].expanded is False
    assert row_ids(controller) == ["root_node"]


def test_stale_toggle_after_rebuild_is_noop(controller):
    controller.set_data(TREE_DATA, is_tree=True)
    controller.toggle_node("root_node")

    controller.set_data({"other": {"leaf": 1}})
    assert row_ids(controller) == ["other"]
    assert controller.toggle_node("node_child") is None
    assert row_ids(controller) == ["other"]


def test_invalid_tree_data_keeps_previous_state(controller):
    controller.set_data(TREE_DATA, is_tree=True)
    cyclic = {"a": {}}
    cyclic["a"]["loop"] = cyclic

    with pytest.raises(StructuralError):
        controller.set_data(cyclic)

    assert row_ids(controller) == ["root_node"]
    assert controller.toggle_node("root_node") is True


def test_rowspan_groups(grouped):
    meta = grouped.group_meta

    assert [m.span for m in meta] == [2, 0, 1]
    assert meta[1].is_group_head is False
    assert grouped.processed_data[meta[0].head_index]["id"] == "row_server_2"
    assert grouped.processed_data[meta[2].head_index]["id"] == "row_server_3"


def test_hovering_rowspan_cell_highlights_group(grouped):
    grouped.hover_enter(0, "groupId")

    highlighted = grouped.hover.highlighted_cells
    assert len(highlighted) == 18  # 9 columns x 2 rows sharing the group
    assert {row for row, _ in highlighted} == {0, 1}
    assert all(s.applied for s in grouped.signals)


def test_hover_event_fires_once_with_hovered_item(grouped):
    grouped.hover_enter(0, "groupId")

    assert len(grouped.events) == 1
    assert grouped.events[0].item["groupId"] == "Monitor"


def test_hovering_single_row_group(grouped):
    grouped.hover_enter(2, "serverState")

    assert grouped.hover.highlighted_cells == {(2, key) for key in grouped.column_keys}


def test_prop_change_clears_active_highlight(grouped):
    grouped.hover_enter(0, "groupId")

    grouped.set_options(group_column_count=1)

    assert grouped.hover.highlighted_cells == set()
    assert grouped.hover.current_target is None
    assert not grouped.signals[-1].applied


def test_bad_group_column_count_falls_back_to_ungrouped(grouped):
    grouped.set_options(group_column_count=20)

    assert grouped.configuration_error is not None
    assert grouped.group_meta is None
    assert len(grouped.table_rows) == 3

    grouped.hover_enter(0, "groupId")
    assert grouped.hover.highlighted_cells == set()
    assert len(grouped.events) == 1


def test_rowspan_hover_can_be_disabled():
    controller = DataTableController(
        columns=ROWSPAN_HEADERS,
        data=ROWSPAN_DATA,
        options=TableOptions(group_column_count=2),
        config=DataTableConfig(enable_rowspan_hover=False),
    )

    event = controller.hover_enter(0, "groupId")

    assert event.item["id"] == "row_server_2"
    assert controller.hover.highlighted_cells == set()


def test_arrow_table_input():
    table = pa.table({"id": ["a", "b"], "value": [1, None]})
    controller = DataTableController(
        columns=[{"value": "id"}, {"value": "value"}],
        data=table,
        config=DataTableConfig(),
    )

    assert controller.processed_data == [{"id": "a", "value": 1}, {"id": "b", "value": "null"}]


def test_to_dict_includes_group_metadata(grouped):
    result = grouped.to_dict()

    assert [r["span"] for r in result["rows"]] == [2, 0, 1]
    assert result["rows"][0]["source"]["id"] == "row_server_2"
    assert result["columns"][0]["display_text"] == "Monitor"
    assert result["configuration_error"] is None


def test_columns_default_to_data_keys():
    events = []
    controller = DataTableController(
        data=[{"group": "a", "value": 1}, {"group": "a", "extra": True}],
        config=DataTableConfig(),
        on_cell_hover=events.append,
    )

    assert controller.column_keys == ["group", "value", "extra"]
    assert controller.processed_data[1]["value"] == "undefined"
    assert [c["key"] for c in controller.to_dict()["columns"]] == ["group", "value", "extra"]

    controller.set_options(group_column_count=1)
    controller.hover_enter(1, "extra")

    assert controller.configuration_error is None
    assert controller.hover.highlighted_cells == {
        (row, key) for row in (0, 1) for key in ("group", "value", "extra")
    }
    assert events[0].item["extra"] is True
