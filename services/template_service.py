"""
Downloadable CSV template for guest blog site bulk uploads.
"""

import pandas as pd

from services.column_mapping_service import EXPECTED_COLUMN_ORDER

TEMPLATE_FILENAME = "guest-blog-sites-template.csv"

SAMPLE_ROWS = [
    ["https://techcrunch.com", "editor@techcrunch.com", "95", "94", "15000000", "2", "TECHNOLOGY_GADGETS", "US", "en", "2-3 days", "500", "ACTIVE"],
    ["https://forbes.com/business", "business@forbes.com", "92", "93", "12000000", "1", "BUSINESS_ENTREPRENEURSHIP", "US", "en", "3-5 days", "450", "ACTIVE"],
    ["https://entrepreneur.com", "editor@entrepreneur.com", "88", "87", "8500000", "3", "BUSINESS_ENTREPRENEURSHIP", "US", "en", "1-2 days", "400", "ACTIVE"],
    ["https://mashable.com", "tech@mashable.com", "85", "86", "7200000", "2", "TECHNOLOGY_GADGETS", "US", "en", "2-4 days", "350", "ACTIVE"],
    ["https://businessinsider.com", "editor@businessinsider.com", "90", "89", "9800000", "1", "BUSINESS_ENTREPRENEURSHIP", "US", "en", "3-4 days", "425", "ACTIVE"],
    ["https://healthline.com", "editorial@healthline.com", "82", "83", "6500000", "1", "HEALTH_FITNESS", "US", "en", "5-7 days", "300", "ACTIVE"],
    ["https://investopedia.com", "finance@investopedia.com", "88", "87", "3800000", "1", "FINANCE_INVESTMENT", "US", "en", "3-5 days", "375", "ACTIVE"],
    ["https://cnn.com/travel", "travel@cnn.com", "87", "88", "8900000", "2", "TRAVEL_TOURISM", "US", "en", "3-5 days", "400", "ACTIVE"],
    ["https://foodnetwork.com", "editor@foodnetwork.com", "81", "80", "3600000", "1", "FOOD_NUTRITION", "US", "en", "4-6 days", "250", "ACTIVE"],
    ["https://vogue.com", "fashion@vogue.com", "89", "88", "4200000", "1", "FASHION_BEAUTY", "US", "en", "7-10 days", "450", "ACTIVE"],
]


def build_csv_template() -> str:
    """Header row in template order plus sample rows, as CSV text."""
    df = pd.DataFrame(SAMPLE_ROWS, columns=EXPECTED_COLUMN_ORDER)
    return df.to_csv(index=False, lineterminator="\n")
