from estately.normalizer import edit_defaults, normalize_listings, record_from_edit, split_trailing_token
from estately.schemas import EditListingForm, ListingRecord


def test_unwraps_json_rows_and_maps_remote_keys():
    payload = [
        {"json": {"row_number": 4, "Name": "Ali", "Location_": "Multan", "Price_Range": "1,000,000 - 5,000,000 PKR",
                  "Property_Type": "House", "Area": "10 marla", "Construction_Status": "Ready to move",
                  "Image": "https://img.test/a.jpg", "Phone_Number": 3001234567}},
        {"name": "Sara", "location": "Lahore", "priceRange": "50,000 - 100,000 USD"},
    ]
    recs = normalize_listings(payload)
    assert len(recs) == 2
    assert recs[0].id == "4"
    assert recs[0].location == "Multan"
    assert recs[0].phone_number == "3001234567"
    assert recs[0].image_url == "https://img.test/a.jpg"
    assert recs[1].name == "Sara"
    assert recs[1].area is None


def test_non_array_is_rejected_and_junk_rows_skipped():
    assert normalize_listings({"message": "oops"}) is None
    assert normalize_listings(None) is None
    assert normalize_listings(["junk", 3, {"Name": "Ok"}]) == [ListingRecord(name="Ok")]


def test_split_trailing_token():
    assert split_trailing_token("250,001 - 500,000 USD", ["USD", "PKR"], "USD") == ("250,001 - 500,000", "USD")
    assert split_trailing_token("10 marla", ["sq ft", "marla", "kanal"], "sq ft") == ("10", "marla")
    assert split_trailing_token("1200", ["sq ft", "marla", "kanal"], "sq ft") == ("1200", "sq ft")
    assert split_trailing_token(None, ["USD"], "USD") == ("", "USD")


def test_edit_round_trip(records):
    defaults = edit_defaults(records[0])
    assert defaults["priceRange"] == "1,000,000 - 5,000,000"
    assert defaults["priceCurrency"] == "PKR"
    assert defaults["area"] == "10"
    assert defaults["areaUnit"] == "marla"

    form = EditListingForm(**{**defaults, "name": "Ali", "email": "ali@example.com", "phoneNumber": "1",
                              "location": "Multan Cantt"})
    updated = record_from_edit(records[0], form.payload("1"))
    assert updated.location == "Multan Cantt"
    assert updated.price_range == "1,000,000 - 5,000,000 PKR"
    assert updated.area == "10 marla"
    assert updated.id == "1"
