from kosztorys.merger import is_continuation, merge_fragments
from kosztorys.models import Table

HEADERS = ["Lp.", "Gatunek", "Obwód [cm]", "Zabiegi"]


def test_empty_input_yields_no_tables():
    assert merge_fragments([]) == []


def test_single_table_is_returned_unchanged():
    table = Table(headers=list(HEADERS), rows=[["1", "Dąb", "120", "CS"]], title="Tabela 1")

    merged = merge_fragments([table])

    assert merged == [table]
    assert merged[0] is not table


def test_fragments_with_identical_headers_are_joined():
    first = Table(headers=list(HEADERS), rows=[["1", "Dąb", "120", "CS"]], title="Tabela 1")
    second = Table(headers=list(HEADERS), rows=[["2", "Klon", "40", "Uo"]], title="ciąg dalszy")

    merged = merge_fragments([first, second])

    assert len(merged) == 1
    assert merged[0].title == "Tabela 1"
    assert merged[0].rows == [["1", "Dąb", "120", "CS"], ["2", "Klon", "40", "Uo"]]
    assert first.rows == [["1", "Dąb", "120", "CS"]]


def test_fragment_with_header_like_headers_is_joined():
    first = Table(headers=list(HEADERS), rows=[["1", "Dąb", "120", "CS"]])
    second = Table(headers=["lp", "gatunek", "obwód", "zabiegi"], rows=[["2", "Klon", "40", "CS"]])

    assert is_continuation(first, second)
    assert len(merge_fragments([first, second])) == 1


def test_near_identical_layout_fallback():
    first = Table(headers=list(HEADERS), rows=[["1", "Dąb", "120", "CS"]])
    second = Table(headers=["7", "Jesion", "300", "CR", ""], rows=[["8", "Buk", "210", "CS", ""]])

    merged = merge_fragments([first, second])

    assert len(merged) == 1
    assert merged[0].headers == HEADERS
    assert merged[0].rows[-1] == ["8", "Buk", "210", "CS", ""]


def test_incompatible_fragment_starts_new_table_in_order():
    first = Table(headers=list(HEADERS), rows=[["1", "Dąb", "120", "CS"]], title="Drzewa")
    notes = Table(headers=["Lp", "Uwagi"], rows=[["1", "Teren zielony"]], title="Uwagi")
    third = Table(headers=["Drzewo", "Stan"], rows=[["Buk", "dobry"]], title="Stan")

    merged = merge_fragments([first, notes, third])

    assert [table.title for table in merged] == ["Drzewa", "Uwagi", "Stan"]


def test_narrow_fragments_do_not_use_the_fallback():
    first = Table(headers=["A", "B", "C"], rows=[["1", "2", "3"]])
    second = Table(headers=["D", "E", "F"], rows=[["4", "5", "6"]])

    assert len(merge_fragments([first, second])) == 2


def test_fragment_headed_by_header_keywords_continues_any_table():
    notes = Table(headers=["Lp", "Uwagi"], rows=[["1", "Teren zielony"]])
    trees = Table(headers=list(HEADERS), rows=[["1", "Buk", "90", "CP"]])

    merged = merge_fragments([notes, trees])

    assert len(merged) == 1
    assert merged[0].headers == ["Lp", "Uwagi"]
    assert merged[0].rows[-1] == ["1", "Buk", "90", "CP"]
