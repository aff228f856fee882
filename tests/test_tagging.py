from apps.checkins.tagging import suggest_tags


def test_no_keywords_is_general():
    assert suggest_tags("Nothing to report this week.") == ["general"]
    assert suggest_tags("") == ["general"]


def test_case_insensitive_substring_match():
    assert suggest_tags("Hit the GYM twice") == ["exercise"]


def test_multiple_categories_in_table_order():
    tags = suggest_tags("Felt tired and frustrated, skipped a meal")
    assert tags == ["nutrition", "energy", "mood"]


def test_overlapping_categories_are_all_kept():
    tags = suggest_tags("Completed my training goal")
    assert tags == ["exercise", "motivation", "success"]
