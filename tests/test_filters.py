from kosztorys.filters import drop_blank_rows, purge_header_rows, purge_removal_rows, renumber_ordinals
from kosztorys.headers import is_header_row

HEADERS = ["Lp.", "Gatunek", "Obwód [cm]", "Zabiegi"]


def test_purge_header_rows_removes_repeated_headers():
    rows = [
        ["1", "Dąb", "120", "CS"],
        ["Lp.", "Gatunek", "Obwód [cm]", "Zabiegi"],
        ["lp", "gatunek", "obwód", "zabiegi"],
        ["2", "Klon", "40", "W2t"],
    ]

    purged = purge_header_rows(rows, HEADERS)

    assert purged == [["1", "Dąb", "120", "CS"], ["2", "Klon", "40", "W2t"]]
    assert not any(is_header_row(row, HEADERS) for row in purged)


def test_purge_removal_rows_normalizes_the_treatment_cell():
    rows = [
        ["1", "Dąb", "120", "CS"],
        ["2", "Klon", "40", " Uo. "],
        ["3", "Grab", "60", "U"],
        ["4", "Buk", "90", "Uo, CS"],
    ]

    kept = purge_removal_rows(rows, 3)

    assert [row[0] for row in kept] == ["1", "4"]


def test_purge_removal_rows_needs_a_treatment_column():
    rows = [["1", "Klon", "40", "Uo"]]

    assert purge_removal_rows(rows, None) == rows


def test_purge_removal_rows_handles_ragged_rows():
    assert purge_removal_rows([["1", "Klon"]], 3) == [["1", "Klon"]]


def test_drop_blank_rows_keeps_rows_with_any_data_after_ordinal():
    rows = [["1", "", " ", ""], ["2", "", "", "CS"], ["3"], ["", "Dąb"]]

    assert drop_blank_rows(rows) == [["2", "", "", "CS"], ["", "Dąb"]]


def test_renumber_ordinals_relabels_numeral_cells_by_position():
    rows = [["3", "Dąb"], ["7.", "Klon"], ["Park", "Lipa"], ["12", "Buk"]]

    assert renumber_ordinals(rows) == [["1", "Dąb"], ["2", "Klon"], ["Park", "Lipa"], ["4", "Buk"]]
    assert rows[0] == ["3", "Dąb"]


def test_renumber_ordinals_skips_empty_rows():
    assert renumber_ordinals([[], ["5", "Dąb"]]) == [[], ["2", "Dąb"]]
