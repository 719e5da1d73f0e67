import unittest

from batch_types import CellFill, LayerRef, Rename, SortDirection
from grid_state import GridStore, compose_name


def make_layers():
    return [
        LayerRef("1", "btn_primary_hover", 0, 0),
        LayerRef("2", "btn_secondary_hover", 0, 40),
        LayerRef("3", "icon", 0, 80),
    ]


def make_store(**kwargs):
    store = GridStore(**kwargs)
    store.initialize_from_layers(make_layers())
    return store


def assert_grid_shape(case, state):
    case.assertGreaterEqual(state.column_count, 1)
    case.assertEqual(list(state.frame.columns), [c.id for c in state.columns])
    case.assertEqual(len(state.frame), len(state.layer_ids))
    case.assertEqual(len(state.frame), len(state.layer_types))


class TestInitialize(unittest.TestCase):
    def test_columns_follow_longest_name_plus_blank(self):
        store = make_store()
        self.assertEqual(store.column_count, 6)
        self.assertEqual([c.header for c in store.columns], ["A", "B", "C", "D", "E", "F"])
        self.assertEqual(store.rows[0], ["btn", "_", "primary", "_", "hover", ""])
        self.assertEqual(store.rows[2], ["icon", "", "", "", "", ""])
        assert_grid_shape(self, store.state)

    def test_column_ids_are_unique(self):
        store = make_store()
        ids = [c.id for c in store.columns]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertTrue(all(i.startswith("col_") for i in ids))

    def test_unedited_grid_reproduces_original_names(self):
        store = make_store()
        self.assertEqual(
            store.get_renames(),
            [
                Rename("1", "btn_primary_hover"),
                Rename("2", "btn_secondary_hover"),
                Rename("3", "icon"),
            ],
        )

    def test_initialize_clears_history(self):
        store = make_store()
        store.set_cell_value(0, 0, "x")
        store.initialize_from_layers(make_layers())
        self.assertFalse(store.can_undo)
        self.assertFalse(store.can_redo)

    def test_empty_selection(self):
        store = GridStore()
        store.initialize_from_layers([])
        self.assertEqual(store.row_count, 0)
        self.assertEqual(store.column_count, 2)
        self.assertEqual(store.get_preview_names(), [])


class TestMutations(unittest.TestCase):
    def test_set_cell_updates_preview(self):
        store = make_store()
        store.set_cell_value(0, 2, "ghost")
        self.assertEqual(store.get_preview_names()[0], "btn_ghost_hover")

    def test_inner_blank_cell_renders_as_space(self):
        store = make_store()
        store.set_cell_value(0, 1, "")
        self.assertEqual(store.get_preview_names()[0], "btn primary_hover")

    def test_out_of_range_writes_are_ignored(self):
        store = make_store()
        store.set_cell_value(10, 0, "x")
        store.set_column_header(10, "Nope")
        self.assertFalse(store.can_undo)
        self.assertEqual(store.get_cell(10, 0), "")

    def test_add_column_before_first(self):
        store = make_store()
        before = [c.id for c in store.columns]
        column = store.add_column(-1)
        self.assertEqual(store.columns[0], column)
        self.assertEqual(column.header, "G")
        self.assertEqual([c.id for c in store.columns[1:]], before)
        self.assertEqual([row[0] for row in store.rows], ["", "", ""])
        assert_grid_shape(self, store.state)

    def test_add_column_past_end_appends(self):
        store = make_store()
        column = store.add_column(99)
        self.assertEqual(store.columns[-1], column)

    def test_delete_column(self):
        store = make_store()
        self.assertTrue(store.delete_column(1))
        self.assertEqual(store.column_count, 5)
        self.assertEqual(store.get_preview_names()[0], "btnprimary_hover")
        assert_grid_shape(self, store.state)

    def test_last_column_cannot_be_deleted(self):
        store = GridStore()
        store.initialize_from_layers([LayerRef("1", "", 0, 0)])
        self.assertTrue(store.delete_column(0))
        self.assertEqual(store.column_count, 1)
        self.assertFalse(store.delete_column(0))
        self.assertEqual(store.column_count, 1)

    def test_set_column_header(self):
        store = make_store()
        store.set_column_header(0, "Prefix")
        self.assertEqual(store.columns[0].header, "Prefix")
        store.undo()
        self.assertEqual(store.columns[0].header, "A")


class TestFillCells(unittest.TestCase):
    def test_batch_is_one_history_entry(self):
        store = make_store()
        applied = store.fill_cells(
            [
                CellFill(0, 0, "a"),
                {"row": 1, "col": 0, "value": "b"},
                (9, 0, "out of range"),
            ]
        )
        self.assertEqual(applied, 2)
        self.assertEqual(len(store.history.undo_stack), 1)
        store.undo()
        self.assertEqual([row[0] for row in store.rows], ["btn", "btn", "icon"])

    def test_nothing_in_range_records_nothing(self):
        store = make_store()
        self.assertEqual(store.fill_cells([CellFill(5, 5, "x")]), 0)
        self.assertFalse(store.can_undo)


class TestHistory(unittest.TestCase):
    def test_undo_then_redo_round_trip(self):
        store = make_store()
        before = store.state.copy()
        store.set_cell_value(0, 0, "x")
        after = store.state.copy()

        self.assertTrue(store.undo())
        self.assertEqual(store.state, before)
        self.assertTrue(store.redo())
        self.assertEqual(store.state, after)

    def test_new_edit_clears_redo(self):
        store = make_store()
        store.set_cell_value(0, 0, "x")
        store.undo()
        self.assertTrue(store.can_redo)
        store.set_cell_value(0, 0, "y")
        self.assertFalse(store.can_redo)

    def test_empty_stacks(self):
        store = make_store()
        self.assertFalse(store.undo())
        self.assertFalse(store.redo())

    def test_depth_is_bounded(self):
        store = make_store(undo_max_depth=3)
        for i in range(5):
            store.set_cell_value(0, 0, str(i))
        undone = 0
        while store.undo():
            undone += 1
        self.assertEqual(undone, 3)
        self.assertEqual(store.get_cell(0, 0), "1")

    def test_structural_undo_restores_columns(self):
        store = make_store()
        ids = [c.id for c in store.columns]
        store.delete_column(0)
        store.undo()
        self.assertEqual([c.id for c in store.columns], ids)
        self.assertEqual(store.rows[0][0], "btn")


class TestReorder(unittest.TestCase):
    def test_reorder_keeps_edits_and_is_not_undoable(self):
        store = make_store()
        store.set_cell_value(0, 2, "ghost")
        store.reorder_by_direction(make_layers(), SortDirection.BOTTOM_TO_TOP)

        self.assertEqual(store.layer_ids, ["3", "2", "1"])
        self.assertEqual(store.get_preview_names()[2], "btn_ghost_hover")
        self.assertEqual(store.state.sort_direction, SortDirection.BOTTOM_TO_TOP)
        self.assertEqual(len(store.history.undo_stack), 1)
        assert_grid_shape(self, store.state)

    def test_undo_after_reorder_keeps_new_order(self):
        store = make_store()
        store.set_cell_value(0, 2, "ghost")
        store.reorder_by_direction(make_layers(), "bottom-to-top")
        store.undo()

        self.assertEqual(store.layer_ids, ["3", "2", "1"])
        self.assertEqual(store.get_preview_names()[2], "btn_primary_hover")

    def test_reorder_with_repeated_layer_ids_keeps_row_count(self):
        layers = [LayerRef("a", "x_1", 0, 0), LayerRef("a", "x_2", 0, 40)]
        store = GridStore()
        store.initialize_from_layers(layers)
        store.set_cell_value(0, 0, "y")
        store.reorder_by_direction(layers, SortDirection.BOTTOM_TO_TOP)

        self.assertEqual(store.row_count, 2)
        self.assertEqual(store.layer_ids, ["a", "a"])
        self.assertEqual(sorted(store.get_preview_names()), ["x_2", "y_1"])
        assert_grid_shape(self, store.state)
        store.undo()
        self.assertEqual(store.row_count, 2)


class TestSortDirection(unittest.TestCase):
    def test_set_sort_direction_only_records(self):
        store = make_store()
        store.set_sort_direction("right-to-left")
        self.assertEqual(store.state.sort_direction, SortDirection.RIGHT_TO_LEFT)
        self.assertEqual(store.layer_ids, ["1", "2", "3"])
        self.assertFalse(store.can_undo)

    def test_initialize_uses_last_direction(self):
        store = make_store()
        store.set_sort_direction("bottom-to-top")
        store.initialize_from_layers(make_layers())
        self.assertEqual(store.layer_ids, ["3", "2", "1"])


class TestComposeName(unittest.TestCase):
    def test_trailing_blanks_dropped_inner_blanks_spaced(self):
        self.assertEqual(compose_name(["a", "", "b", "", ""]), "a b")
        self.assertEqual(compose_name(["", "", ""]), "")
        self.assertEqual(compose_name(["", "a"]), " a")


if __name__ == "__main__":
    unittest.main()
