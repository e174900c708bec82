"""Tests for country name resolution and classification."""

import pytest

from sovereign_shield.core.errors import CountryTablesError
from sovereign_shield.jurisdiction import (
    CountryCategory,
    CountryClassifier,
    NameResolver,
    build_country_tables,
    load_country_tables,
)


# =============================================================================
# Name Resolution
# =============================================================================


class TestNameResolver:
    """Tests for free-text country resolution."""

    @pytest.mark.parametrize("text", ["United States", "USA", "us", "united states of america"])
    def test_united_states_spellings(self, resolver, text):
        assert resolver.resolve(text) == "US"

    def test_unknown_name_is_a_miss(self, resolver):
        assert resolver.resolve("Atlantis") == ""

    def test_empty_input(self, resolver):
        assert resolver.resolve("") == ""
        assert resolver.resolve(None) == ""
        assert resolver.resolve("   ") == ""

    def test_alias_beats_code_passthrough(self, resolver):
        """'UK' is an alias for GB, not a passthrough code."""
        assert resolver.resolve("uk") == "GB"

    def test_two_letter_passthrough(self, resolver):
        assert resolver.resolve("zz") == "ZZ"

    def test_surrounding_whitespace(self, resolver):
        assert resolver.resolve("  germany ") == "DE"

    def test_substring_match(self, resolver):
        assert resolver.resolve("Federal Republic of Germany") == "DE"
        assert resolver.resolve("Republic of Korea") == "KR"

    def test_display_names_are_aliases(self, resolver):
        assert resolver.resolve("Faroe Islands") == "FO"
        assert resolver.resolve("Isle of Man") == "IM"

    def test_deterministic(self, resolver):
        results = {resolver.resolve("Kingdom of the Netherlands") for _ in range(5)}
        assert results == {"NL"}

    def test_first_alias_in_table_order_wins(self):
        resolver = NameResolver({"NEW MEXICO": "XM", "MEXICO": "MX"})
        assert resolver.resolve("New Mexico State") == "XM"
        assert resolver.resolve("Mexico City") == "MX"

    def test_alias_table_is_read_only(self, resolver):
        with pytest.raises(TypeError):
            resolver.aliases["ATLANTIS"] = "AT"

    def test_destination_code_wins_over_name(self, resolver):
        assert resolver.resolve_destination("IN", "United States") == "IN"
        assert resolver.resolve_destination(None, "United States") == "US"
        assert resolver.resolve_destination("", "Atlantis") == ""


# =============================================================================
# Classification
# =============================================================================


class TestCountryClassifier:
    """Tests for destination classification."""

    def test_every_eu_eea_code(self, classifier, tables):
        for code in tables.eu_eea:
            result = classifier.classify(code)
            assert result.category == CountryCategory.EU_EEA
            assert result.legal_basis_tag == "Art. 45"

    def test_norway_is_eea(self, classifier):
        """Guards against YAML reading NO as a boolean."""
        assert classifier.classify("NO").category == CountryCategory.EU_EEA

    def test_every_blocked_code(self, classifier, tables):
        for code in tables.blocked - tables.eu_eea:
            result = classifier.classify(code)
            assert result.category == CountryCategory.BLOCKED
            assert result.legal_basis_tag == "Art. 44"

    def test_scc_required_code(self, classifier):
        result = classifier.classify("US")
        assert result.category == CountryCategory.SCC_REQUIRED
        assert result.legal_basis_tag == "Art. 46"
        assert result.legal_basis_text == "Art. 46 — Standard Contractual Clauses Required"

    def test_adequate_code(self, classifier):
        result = classifier.classify("GB")
        assert result.category == CountryCategory.ADEQUATE
        assert result.legal_basis_tag == "Art. 45"
        assert result.allows_free_transfer

    def test_unknown_code_defaults_to_scc_required(self, classifier):
        result = classifier.classify("ZZ")
        assert result.category == CountryCategory.SCC_REQUIRED
        assert result.legal_basis_tag == "Art. 46"
        assert result.legal_basis_text == "Art. 46 — SCC Required (third country)"
        assert not result.allows_free_transfer

    def test_lowercase_code(self, classifier):
        assert classifier.classify("de").category == CountryCategory.EU_EEA

    def test_empty_code(self, classifier):
        result = classifier.classify("")
        assert result.category == CountryCategory.SCC_REQUIRED
        assert result.resolved is False
        assert result.legal_basis_text == "—"

    def test_priority_order(self):
        tables = build_country_tables({
            "eu_eea": ["FR"],
            "blocked": ["FR", "CN"],
            "scc_required": ["CN", "FR"],
            "adequate": ["CN", "FR"],
        })
        classifier = CountryClassifier(tables)
        assert classifier.classify("FR").category == CountryCategory.EU_EEA
        assert classifier.classify("CN").category == CountryCategory.BLOCKED

    def test_scc_list_beats_adequate_list(self):
        tables = build_country_tables({
            "eu_eea": [],
            "blocked": [],
            "scc_required": ["BR"],
            "adequate": ["BR"],
        })
        assert CountryClassifier(tables).classify("BR").category == CountryCategory.SCC_REQUIRED

    def test_classify_destination_by_name(self, classifier):
        result = classifier.classify_destination(name="Deutschland")
        assert result.code == "DE"
        assert result.category == CountryCategory.EU_EEA

    def test_classify_unresolvable_destination(self, classifier):
        result = classifier.classify_destination(name="Atlantis")
        assert result.resolved is False
        assert result.category == CountryCategory.SCC_REQUIRED

    def test_country_name(self, classifier):
        assert classifier.country_name("ch") == "Switzerland"
        assert classifier.country_name("ZZ") == "ZZ"


# =============================================================================
# Tables
# =============================================================================


class TestCountryTables:
    """Tests for loading the country tables."""

    def test_default_table_sizes(self, tables):
        assert len(tables.eu_eea) == 30
        assert len(tables.adequate) == 15
        assert len(tables.blocked) == 6

    def test_aliases_list_explicit_entries_first(self, tables):
        assert list(tables.aliases)[0] == "UNITED STATES"

    def test_missing_file(self, tmp_path):
        with pytest.raises(CountryTablesError):
            load_country_tables(tmp_path / "missing.yaml")

    def test_missing_section(self, tmp_path):
        path = tmp_path / "countries.yaml"
        path.write_text("eu_eea: [FR]\nadequate: []\nblocked: []\n", encoding="utf-8")
        with pytest.raises(CountryTablesError, match="scc_required"):
            load_country_tables(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "countries.yaml"
        path.write_text("eu_eea: [FR\n", encoding="utf-8")
        with pytest.raises(CountryTablesError):
            load_country_tables(path)

    def test_custom_file(self, tmp_path):
        path = tmp_path / "countries.yaml"
        path.write_text(
            "eu_eea: [fr]\nadequate: []\nscc_required: []\nblocked: [ru]\n"
            "names:\n  FR: France\naliases:\n  LA FRANCE: FR\n",
            encoding="utf-8",
        )
        tables = load_country_tables(path)
        assert tables.eu_eea == frozenset({"FR"})
        assert NameResolver.from_tables(tables).resolve("la france") == "FR"
