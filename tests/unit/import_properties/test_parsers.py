"""Tests for import_properties.normalize_properties.parsers module."""

from import_properties.normalize_properties.parsers import (
    coerce_property_type,
    decode_html_entities,
    infer_property_type,
    parse_int,
    parse_leading_int,
    parse_price,
    strip_html_tags,
)


class TestParsePrice:
    def test_dot_thousands_separators(self) -> None:
        assert parse_price("590.000 €") == 590000

    def test_millions(self) -> None:
        assert parse_price("1.250.000 €") == 1250000

    def test_currency_prefix(self) -> None:
        assert parse_price("€ 95000") == 95000

    def test_plain_integer(self) -> None:
        assert parse_price(250000) == 250000

    def test_empty_is_zero(self) -> None:
        assert parse_price("") == 0

    def test_none_is_zero(self) -> None:
        assert parse_price(None) == 0

    def test_no_digits_is_zero(self) -> None:
        assert parse_price("Price on application") == 0


class TestParseInt:
    def test_plain_number(self) -> None:
        assert parse_int("3") == 3

    def test_surrounding_whitespace(self) -> None:
        assert parse_int(" 4 ") == 4

    def test_text_is_none(self) -> None:
        assert parse_int("many") is None

    def test_none(self) -> None:
        assert parse_int(None) is None


class TestParseLeadingInt:
    def test_square_metres(self) -> None:
        assert parse_leading_int("120 m²") == 120

    def test_digits_after_text(self) -> None:
        assert parse_leading_int("approx. 95 m2") == 95

    def test_empty(self) -> None:
        assert parse_leading_int("") is None

    def test_none(self) -> None:
        assert parse_leading_int(None) is None


class TestInferPropertyType:
    def test_villa_wins_over_house(self) -> None:
        assert infer_property_type("Villa House") == "villa"

    def test_detached_is_villa(self) -> None:
        assert infer_property_type("Detached home with pool") == "villa"

    def test_apartment(self) -> None:
        assert infer_property_type("Seaside Apartment") == "apartment"

    def test_flat_is_apartment(self) -> None:
        assert infer_property_type("Studio flat in the old town") == "apartment"

    def test_commercial(self) -> None:
        assert infer_property_type("Commercial premises") == "commercial"

    def test_land(self) -> None:
        assert infer_property_type("Building land with views") == "land"

    def test_no_keyword_defaults_to_house(self) -> None:
        assert infer_property_type("Rustic Cottage") == "house"

    def test_none_defaults_to_house(self) -> None:
        assert infer_property_type(None) == "house"


class TestCoercePropertyType:
    def test_known_type_is_lowercased(self) -> None:
        assert coerce_property_type(" Villa ") == "villa"

    def test_unknown_type(self) -> None:
        assert coerce_property_type("Bungalow") is None

    def test_non_string(self) -> None:
        assert coerce_property_type(None) is None
        assert coerce_property_type({"en": "villa"}) is None


class TestDecodeHtmlEntities:
    def test_amp_and_nbsp(self) -> None:
        assert decode_html_entities("Bright &amp; airy &nbsp;home") == "Bright & airy  home"

    def test_angle_brackets(self) -> None:
        assert decode_html_entities("&lt;p&gt;") == "<p>"

    def test_escaped_entity_is_decoded_once(self) -> None:
        assert decode_html_entities("&amp;lt;b&amp;gt;") == "&lt;b&gt;"

    def test_quotes(self) -> None:
        assert decode_html_entities("It&#39;s &quot;new&quot;") == 'It\'s "new"'
        assert decode_html_entities("&ldquo;Sea&rdquo; &lsquo;view&rsquo;") == "\"Sea\" 'view'"

    def test_numeric_entities(self) -> None:
        assert decode_html_entities("caf&#233;") == "café"
        assert decode_html_entities("&#x41;") == "A"

    def test_unstorable_code_points_left_encoded(self) -> None:
        assert decode_html_entities("a&#0;b") == "a&#0;b"
        assert decode_html_entities("&#xD800;") == "&#xD800;"
        assert decode_html_entities("&#x110000;") == "&#x110000;"

    def test_typographic_entities(self) -> None:
        assert decode_html_entities("Wait&hellip;") == "Wait…"
        assert decode_html_entities("2&ndash;3") == "2–3"

    def test_empty_and_none(self) -> None:
        assert decode_html_entities("") == ""
        assert decode_html_entities(None) is None


class TestStripHtmlTags:
    def test_keeps_text_content(self) -> None:
        assert strip_html_tags("<p>Hello <b>world</b></p>") == "Hello world"

    def test_none(self) -> None:
        assert strip_html_tags(None) is None
