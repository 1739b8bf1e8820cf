import pytest

from zinc_sdk.client_base import InvalidRetailerError, ZincError
from zinc_sdk.retailers import Retailer, get_retailer


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    ["amazon", "amazon_uk", "amazon_ca", "amazon_mx", "walmart", "aliexpress"],
)
def test_valid_retailers_round_trip(value):
    retailer = get_retailer(value)
    assert isinstance(retailer, Retailer)
    assert retailer.value == value
    assert str(retailer) == value
    assert get_retailer(str(retailer)) is retailer


@pytest.mark.unit
@pytest.mark.parametrize("value", ["", "Amazon", "amazon_de", "ebay", " walmart"])
def test_invalid_retailers_rejected(value):
    with pytest.raises(InvalidRetailerError) as e:
        get_retailer(value)

    assert isinstance(e.value, ZincError)
    assert isinstance(e.value, ValueError)
    assert "Invalid retailer" in str(e.value)


@pytest.mark.unit
def test_enum_member_passes_through():
    assert get_retailer(Retailer.WALMART) is Retailer.WALMART
