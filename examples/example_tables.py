"""
Example usage of the datatable_engine with tree and grouped data.
"""
import json
from datatable_engine.controller import DataTableController
from datatable_engine.types.table_spec import TableOptions


def print_rows(title, controller):
    print(f"\n{title}")
    for row in controller.table_rows:
        marker = "-" if row.expanded else ("+" if row.has_children else " ")
        print(f"{'  ' * row.level}{marker} {row.id}")


def main():
    # =================================================================
    # 1. Tree table: nested object shown as expandable rows
    # =================================================================
    parameters = {
        "root_node": {
            "node_child": {"grand_child": {"great_grand_child": "great_grand_child"}},
            "node_child_1": "node_child_1 value",
        },
    }
    tree = DataTableController(
        columns=[{"text": "Variable", "value": "id"}, {"text": "Value", "value": "value"}],
        data=parameters,
        options=TableOptions(is_tree=True),
    )
    print_rows("Initial tree (collapsed):", tree)

    tree.toggle_node("root_node")
    print_rows("After expanding root_node:", tree)

    tree.set_options(editable_cell=True)
    print_rows("Editing enabled (all nodes expanded):", tree)

    # =================================================================
    # 2. Grouped table: rows sharing a monitor are merged
    # =================================================================
    servers = [
        {"groupId": "Monitor", "monitorState": "Running", "id": "row_server_2", "serverState": "Slave, Running"},
        {"groupId": "Monitor", "monitorState": "Running", "id": "row_server_1", "serverState": "Master, Running"},
        {"groupId": "monitor-test", "monitorState": "Running", "id": "row_server_3", "serverState": "Down"},
    ]
    grouped = DataTableController(
        columns=[
            {"text": "Monitor", "value": "groupId"},
            {"text": "State", "value": "monitorState"},
            {"text": "Servers", "value": "id"},
            {"text": "State", "value": "serverState"},
        ],
        data=servers,
        options=TableOptions(group_column_count=2),
        on_cell_hover=lambda event: print(f"\ncell-hover: {event.item['id']}"),
    )
    print("\nGroup spans:", [meta.span for meta in grouped.group_meta])

    grouped.hover_enter(1, "serverState")
    print("Highlighted cells:", json.dumps(sorted(grouped.hover.highlighted_cells)))


if __name__ == "__main__":
    main()
