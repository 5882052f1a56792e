"""Tests for swiss_army.args — flag-map encoding and kebab-case conversion.

Validates that ``obj_to_args`` emits one ``--<kebab-name>`` token per
truthy entry in insertion order, drops falsy entries entirely, and never
appends values.  ``kebab_case`` is checked against the word boundaries
seen in real option names (camelCase, acronyms, digits, separators).
"""

from collections import OrderedDict

import pytest

from swiss_army.args import kebab_case, obj_to_args


# ---------------------------------------------------------------------------
# kebab_case
# ---------------------------------------------------------------------------
class TestKebabCase:
    """Verify case-boundary splitting, lower-casing, and hyphen joining."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("json", "json"),
            ("noLockfile", "no-lockfile"),
            ("ignoreEngines", "ignore-engines"),
            ("XMLHttpRequest", "xml-http-request"),
            ("fooBAR", "foo-bar"),
            ("foo_bar", "foo-bar"),
            ("already-kebab", "already-kebab"),
            ("Foo Bar", "foo-bar"),
            ("v2", "v-2"),
            ("ABC", "abc"),
        ],
    )
    def test_conversion(self, name, expected):
        """Each identifier style should collapse to lower-case words joined
        by single hyphens."""
        assert kebab_case(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("naïveMode", "naive-mode"),
            ("café", "cafe"),
            ("crèmeBrûlée", "creme-brulee"),
            ("ÉtatCivil", "etat-civil"),
            ("straßeName", "strasse-name"),
            ("æonFlux", "aeon-flux"),
        ],
    )
    def test_accents_stripped(self, name, expected):
        """Accented and non-ASCII Latin letters fold to plain letters and
        keep their place inside the word instead of splitting it."""
        assert kebab_case(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("don'tStop", "dont-stop"),
            ("it’sFine", "its-fine"),
        ],
    )
    def test_apostrophes_removed(self, name, expected):
        """Straight and curly apostrophes are deleted, not treated as word
        separators."""
        assert kebab_case(name) == expected

    def test_non_latin_letters(self):
        """Case boundaries are found in any cased script, not just ASCII."""
        assert kebab_case("ΑλφαΒήτα") == "αλφα-βητα"

    def test_separators_only(self):
        """A name with no word characters has no words, so it converts to
        the empty string rather than raising."""
        assert kebab_case("__") == ""

    def test_deterministic(self):
        """Converting the same name twice must yield the same result."""
        assert kebab_case("someLongOptionName") == kebab_case("someLongOptionName")


# ---------------------------------------------------------------------------
# obj_to_args
# ---------------------------------------------------------------------------
class TestObjToArgs:
    """Verify truthiness filtering, ordering, and token shape."""

    def test_empty_mapping(self):
        """An empty mapping produces no tokens."""
        assert obj_to_args({}) == []

    def test_none(self):
        """``None`` is treated like an empty mapping."""
        assert obj_to_args(None) == []

    def test_mixed_booleans(self):
        """Falsy entries are omitted entirely; there is no ``--flag=false``
        form."""
        args = {"noLockfile": True, "ignoreEngines": False, "json": True}
        assert obj_to_args(args) == ["--no-lockfile", "--json"]

    def test_value_is_discarded(self):
        """A non-boolean truthy value still emits only the bare flag."""
        assert obj_to_args({"fooBar": "x"}) == ["--foo-bar"]

    def test_truthy_values_of_any_type(self):
        """Numbers, strings, and non-empty containers are all truthy and
        emit the flag; their content never reaches the token."""
        args = {"count": 3, "name": "x", "items": [1], "opts": {"a": 1}}
        assert obj_to_args(args) == ["--count", "--name", "--items", "--opts"]

    def test_falsy_values_of_any_type(self):
        """Zero, empty string, None, and empty containers are all falsy and
        emit nothing."""
        args = {"a": 0, "b": "", "c": None, "d": [], "e": {}}
        assert obj_to_args(args) == []

    def test_preserves_insertion_order(self):
        """Tokens follow the mapping's own iteration order, not sorted order."""
        args = OrderedDict([("zeta", True), ("alpha", True), ("midPoint", True)])
        assert obj_to_args(args) == ["--zeta", "--alpha", "--mid-point"]

    def test_every_token_is_prefixed(self):
        """Every emitted token starts with ``--`` and there is exactly one
        per truthy key."""
        args = {"oneFlag": True, "twoFlag": 1, "offFlag": False}
        tokens = obj_to_args(args)
        assert len(tokens) == 2
        assert all(t.startswith("--") for t in tokens)

    def test_does_not_mutate_input(self):
        """Encoding is pure: the input mapping is left untouched."""
        args = {"noLockfile": True, "json": False}
        obj_to_args(args)
        assert args == {"noLockfile": True, "json": False}
