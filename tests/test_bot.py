from estately.bot.keyboards import menu_options, options_keyboard
from estately.filters import PKR_PRICE_RANGES, USD_PRICE_RANGES, FilterCriteria
from estately.schemas import ListingRecord
from estately.utils.formatting import fmt_card, fmt_criteria, photo_url


def test_price_menu_follows_currency():
    c = FilterCriteria()
    assert menu_options("price", c) == USD_PRICE_RANGES
    c.set("price_currency", "PKR")
    assert menu_options("price", c) == PKR_PRICE_RANGES


def test_options_keyboard_callbacks():
    kb = options_keyboard("type", FilterCriteria())
    data = [b.callback_data for row in kb.inline_keyboard for b in row]
    assert data[:4] == ["flt:set:type:0", "flt:set:type:1", "flt:set:type:2", "flt:set:type:3"]
    assert data[-2:] == ["flt:set:type:all", "flt:back"]


def test_card_and_criteria_text():
    rec = ListingRecord(name="Ali_Khan", location="Multan", price_range="1,000,000 - 5,000,000 PKR")
    card = fmt_card(rec)
    assert "Ali\\_Khan" in card
    assert "Area: N/A" in card
    assert fmt_criteria(FilterCriteria()) == "No filters (showing everything)"
    assert fmt_criteria(FilterCriteria(location="Multan")) == "Location: Multan"


def test_only_remote_images_are_sent_as_photos():
    assert photo_url(ListingRecord(image_url="https://img.test/a.jpg")) == "https://img.test/a.jpg"
    assert photo_url(ListingRecord(image_url="data:image/png;base64,AAAA")) is None
    assert photo_url(ListingRecord()) is None


def test_long_name_is_cut_before_escaping():
    first = fmt_card(ListingRecord(name="a" * 99 + "_tail")).splitlines()[0]
    assert first == "*" + "a" * 99 + "\\_*"
