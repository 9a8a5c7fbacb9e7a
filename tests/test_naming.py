from playground.naming import DEFAULT_NAME, resolve_unique_name


def test_free_name_is_returned_trimmed():
    assert resolve_unique_name(set(), "  Foo  ") == "Foo"
    assert resolve_unique_name({"Bar", "Baz - 1"}, "Foo") == "Foo"


def test_free_name_ignores_names_sharing_the_prefix():
    assert resolve_unique_name({"Foobar", "Foo bar - 3"}, "Foo") == "Foo"


def test_empty_base_name_falls_back_to_default():
    assert resolve_unique_name(set(), "") == DEFAULT_NAME == "New Snippet"
    assert resolve_unique_name(set(), "   ") == "New Snippet"
    assert resolve_unique_name(set(), None) == "New Snippet"


def test_collisions_get_an_increasing_number():
    names = {"Foo"}
    first = resolve_unique_name(names, "Foo")
    assert first == "Foo - 1"

    names.add(first)
    second = resolve_unique_name(names, "Foo")
    assert second == "Foo - 2"

    names.add(second)
    assert resolve_unique_name(names, "Foo") == "Foo - 3"


def test_existing_names_are_compared_trimmed():
    assert resolve_unique_name({"  Foo "}, "Foo") == "Foo - 1"


def test_parenthesised_numbers_count():
    assert resolve_unique_name({"Foo", "Foo (4)"}, "Foo") == "Foo - 5"


def test_highest_number_wins_even_with_gaps():
    assert resolve_unique_name({"Foo", "Foo - 7", "Foo - 2"}, "Foo") == "Foo - 8"


def test_suffix_is_used_when_base_name_is_free():
    assert resolve_unique_name({"Bar"}, "Foo", "copy") == "Foo - copy"


def test_taken_base_name_numbers_the_suffixed_name():
    assert resolve_unique_name({"Foo"}, "Foo", "draft") == "Foo - draft - 1"
    assert resolve_unique_name({"Foo", "Foo - draft - 1"}, "Foo", "draft") == "Foo - draft - 2"


def test_suffix_collision_is_numbered():
    result = resolve_unique_name({"Foo", "Foo - copy"}, "Foo", "copy")
    assert result == "Foo - copy - 1"
    assert result not in {"Foo", "Foo - copy"}


def test_default_name_collision():
    assert resolve_unique_name({"New Snippet"}, "") == "New Snippet - 1"


def test_result_never_collides():
    names = {"Foo", "Foo - 1", "Foo - 3", "Foo (2)", "Food"}
    for _ in range(5):
        result = resolve_unique_name(names, "Foo")
        assert result not in names
        names.add(result)
