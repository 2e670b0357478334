"""Tests for import_properties.normalize_properties.normalize module."""

from import_properties.config import NormalizeConfig
from import_properties.models import FeedRecord
from import_properties.normalize_properties.normalize import (
    DEFAULT_CITY,
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    flatten_images,
    normalize_property,
)


def _record(**kwargs) -> FeedRecord:
    defaults = {
        "reference": "KY-1001",
        "title": "Villa &amp; pool",
        "description": "Sunny &nbsp;villa close to the beach",
        "location": "Jávea",
        "price": "590.000 €",
        "rooms": "4",
        "baths": "3",
        "area": "220 m²",
        "plot": "800 m²",
        "images": ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"],
    }
    defaults.update(kwargs)
    return FeedRecord(**defaults)


class TestNormalizeProperty:
    def test_full_record(self) -> None:
        prop = normalize_property(_record(), 0, NormalizeConfig())

        assert prop.reference == "KY-1001"
        assert prop.title == "Villa & pool"
        assert prop.description == "Sunny  villa close to the beach"
        assert prop.property_type == "villa"
        assert prop.price == 590000
        assert prop.country == "Spain"
        assert prop.city == "Jávea"
        assert prop.bedrooms == 4
        assert prop.bathrooms == 3
        assert prop.area == 220
        assert prop.plot_area == 800
        assert prop.image_urls == [
            "https://img.example.com/1.jpg",
            "https://img.example.com/2.jpg",
        ]
        assert prop.images == []

    def test_missing_fields_get_defaults(self) -> None:
        prop = normalize_property(FeedRecord(), 3, NormalizeConfig())

        assert prop.reference == "property_3"
        assert prop.title == DEFAULT_TITLE
        assert prop.description == DEFAULT_DESCRIPTION
        assert prop.city == DEFAULT_CITY
        assert prop.price == 0
        assert prop.property_type == "house"
        assert prop.bedrooms is None
        assert prop.area is None
        assert prop.image_urls == []

    def test_configured_country(self) -> None:
        prop = normalize_property(_record(), 0, NormalizeConfig(country="Portugal"))
        assert prop.country == "Portugal"

    def test_feed_type_wins_over_title_keywords(self) -> None:
        prop = normalize_property(_record(property_type="Apartment"), 0, NormalizeConfig())
        assert prop.property_type == "apartment"

    def test_unknown_feed_type_falls_back_to_title(self) -> None:
        prop = normalize_property(_record(property_type="Finca"), 0, NormalizeConfig())
        assert prop.property_type == "villa"

    def test_localized_text_prefers_english(self) -> None:
        record = _record(description={"es": "Casa bonita", "en": "Lovely house"})
        prop = normalize_property(record, 0, NormalizeConfig())
        assert prop.description == "Lovely house"

    def test_localized_text_without_english(self) -> None:
        record = _record(description={"es": "Casa bonita", "de": "Schönes Haus"})
        prop = normalize_property(record, 0, NormalizeConfig())
        assert prop.description == "Casa bonita"

    def test_html_kept_by_default(self) -> None:
        record = _record(description="<p>Nice &amp; bright</p>")
        prop = normalize_property(record, 0, NormalizeConfig())
        assert prop.description == "<p>Nice & bright</p>"

    def test_html_stripped_when_enabled(self) -> None:
        record = _record(description="<p>Nice &amp; bright</p>")
        prop = normalize_property(record, 0, NormalizeConfig(strip_html=True))
        assert prop.description == "Nice & bright"

    def test_images_capped(self) -> None:
        urls = [f"https://img.example.com/{i}.jpg" for i in range(15)]
        prop = normalize_property(_record(images=urls), 0, NormalizeConfig(max_images=10))
        assert prop.image_urls == urls[:10]


class TestFlattenImages:
    def test_scalar_becomes_list(self) -> None:
        assert flatten_images("https://img.example.com/1.jpg", 10) == [
            "https://img.example.com/1.jpg"
        ]

    def test_blank_entries_dropped_before_cap(self) -> None:
        images = ["", None, "  ", "https://a/1.jpg", "https://a/2.jpg"]
        assert flatten_images(images, 1) == ["https://a/1.jpg"]

    def test_none(self) -> None:
        assert flatten_images(None, 10) == []

    def test_zero_cap(self) -> None:
        assert flatten_images(["https://a/1.jpg"], 0) == []


class TestFeedRecordFromMapping:
    def test_text_node_normalizes_to_defaults(self) -> None:
        prop = normalize_property(FeedRecord.from_mapping("junk"), 0, NormalizeConfig())

        assert prop.reference == "property_0"
        assert prop.title == DEFAULT_TITLE
        assert prop.description == DEFAULT_DESCRIPTION

    def test_none_gives_empty_record(self) -> None:
        record = FeedRecord.from_mapping(None)
        assert record.reference is None
        assert record.images == []

    def test_field_aliases(self) -> None:
        record = FeedRecord.from_mapping({
            "ref": " KY-7 ",
            "desc": "Bright flat",
            "town": "Altea",
            "beds": "2",
            "type": "apartment",
            "images": {"image": "https://img.example.com/1.jpg"},
        })

        assert record.reference == "KY-7"
        assert record.description == "Bright flat"
        assert record.location == "Altea"
        assert record.rooms == "2"
        assert record.property_type == "apartment"
        assert record.images == ["https://img.example.com/1.jpg"]
