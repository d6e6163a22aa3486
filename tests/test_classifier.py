from tripwise.config.settings import ClassifierSettings, get_settings
from tripwise.domain.models import Activity
from tripwise.features.classifier import ActivityClassifier


def _activity(name: str, category: str = "unspecified") -> Activity:
    return Activity(id=name.lower().replace(" ", "-"), name=name, category=category)


def test_sensitive_categories_from_default_config():
    classifier = ActivityClassifier(get_settings().classifier)

    assert classifier.is_outdoor_sensitive(_activity("Sunset", "beach"))
    assert classifier.is_outdoor_sensitive(_activity("Forest walk", "nature"))
    assert classifier.is_outdoor_sensitive(_activity("Night bazaar", "market"))
    assert classifier.is_outdoor_sensitive(_activity("Old fort ramparts", "heritage-outdoor"))


def test_indoor_categories_are_not_sensitive():
    classifier = ActivityClassifier(get_settings().classifier)

    assert not classifier.is_outdoor_sensitive(_activity("City Museum", "museum"))
    assert not classifier.is_outdoor_sensitive(_activity("Central Mall", "shopping"))
    assert not classifier.is_outdoor_sensitive(_activity("Cathedral", "heritage"))


def test_keywords_match_name_when_category_is_vague():
    classifier = ActivityClassifier(get_settings().classifier)

    assert classifier.is_outdoor_sensitive(_activity("Lalbagh Botanical Garden"))
    assert classifier.is_outdoor_sensitive(_activity("Dudhsagar Waterfall"))
    assert classifier.is_outdoor_sensitive(_activity("Nandi Hills Viewpoint"))
    assert classifier.is_outdoor_sensitive(_activity("Sunday Outdoor Market", "food"))


def test_keywords_match_whole_words_only():
    classifier = ActivityClassifier(get_settings().classifier)

    # "park" must not fire inside "Sparkle" or "Parking", but should for "Parks".
    assert not classifier.is_outdoor_sensitive(_activity("Mall Parking Garage", "unspecified"))
    assert not classifier.is_outdoor_sensitive(_activity("Sparkle Gallery", "indoor"))
    assert classifier.is_outdoor_sensitive(_activity("National Parks Tour", "unspecified"))


def test_category_table_is_overridable_without_code_changes():
    settings = ClassifierSettings(category_sensitivity={"food": True}, keywords=["rooftop"])
    classifier = ActivityClassifier(settings)

    assert classifier.is_outdoor_sensitive(_activity("Street food crawl", "food"))
    assert classifier.is_outdoor_sensitive(_activity("Rooftop bar", "unspecified"))
    # Defaults are replaced, not merged, when a caller supplies its own table.
    assert not classifier.is_outdoor_sensitive(_activity("Sunset", "beach"))


def test_category_is_normalized_before_lookup():
    classifier = ActivityClassifier(get_settings().classifier)
    assert classifier.is_outdoor_sensitive(_activity("Sunset", "  Beach "))
