from kosztorys.classifier import classify_columns, score_columns
from kosztorys.models import ColumnRoles, Table


def test_header_keywords_and_content_pick_both_columns():
    table = Table(
        headers=["Lp", "Gatunek", "Obwód", "Zabiegi"],
        rows=[["1", "Dąb", "120", "CS"], ["2", "Klon", "40", "W2t"]],
    )

    assert classify_columns(table) == ColumnRoles(circumference=2, treatment=3)


def test_scores_accumulate_per_column():
    table = Table(
        headers=["Lp", "Obwód [cm]", "Zabiegi"],
        rows=[["1", "120", "CS"], ["2", "95", "Uo"], ["3", "", "KU"]],
    )

    scores = score_columns(table)

    assert [score.circumference for score in scores] == [3, 52, 0]
    assert [score.treatment for score in scores] == [0, 0, 62]


def test_content_alone_resolves_headerless_tables():
    table = Table(
        headers=[],
        rows=[
            ["Lipa", "150", "CR"],
            ["Buk", "300", "W4t"],
            ["Grab", "80", "u."],
        ],
    )

    assert classify_columns(table) == ColumnRoles(circumference=1, treatment=2)


def test_ragged_rows_extend_the_scored_columns():
    table = Table(headers=["A"], rows=[["x", "200"], ["y", "210", "CS"]])

    scores = score_columns(table)

    assert len(scores) == 3
    assert classify_columns(table) == ColumnRoles(circumference=1, treatment=2)


def test_ties_keep_the_earliest_column():
    table = Table(headers=[], rows=[["100", "200", "CS", "CS"]])

    assert classify_columns(table) == ColumnRoles(circumference=0, treatment=2)


def test_numbers_outside_plausible_range_are_not_evidence():
    table = Table(headers=[], rows=[["1200", "CS"], ["950", "CS"]])

    assert classify_columns(table).circumference is None


def test_no_evidence_leaves_roles_unresolved():
    table = Table(headers=["Uwagi"], rows=[["Teren zielony"]])

    roles = classify_columns(table)

    assert roles == ColumnRoles(circumference=None, treatment=None)
    assert not roles.resolved


def test_shared_column_goes_to_treatment_on_higher_or_equal_score():
    # "12 CS" is both a leading number and a treatment code.
    table = Table(headers=[], rows=[["12 CS"]])

    assert classify_columns(table) == ColumnRoles(circumference=None, treatment=0)


def test_shared_column_goes_to_circumference_when_it_scores_higher():
    table = Table(headers=["Obwód / zabiegi"], rows=[["120"], ["130 CS"]])

    # circumference 50 + 2, treatment 50 + 5: treatment wins
    assert classify_columns(table) == ColumnRoles(circumference=None, treatment=0)

    table = Table(headers=["Obwód"], rows=[["120"], ["130"], ["140 we"]])

    # circumference 53, treatment 5
    assert classify_columns(table) == ColumnRoles(circumference=0, treatment=None)
