"""
HTML Content Parser

Extracts product information from retailer page elements:
- Title from the product title heading
- Brand from the byline link ("Visit the X Store", "Brand: X")
- Labelled values from product detail tables and detail bullet lists
- Book signals (breadcrumbs, book-only landmarks, format switcher)

Markup differs by locale and product category, so every field is tried
against several selectors in priority order.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup


class HTMLContentParser:
    """
    Parses product content from HTML elements.

    Usage:
        parser = HTMLContentParser(soup)
        title = parser.extract_title()
        brand = parser.extract_byline_brand()
        isbn = parser.extract_detail_field("ISBN-13")
    """

    TITLE_SELECTORS = [
        '#productTitle',
        '#title span',
        'h1[data-feature-name="title"] span',
    ]

    DETAIL_TABLE_SELECTORS = (
        '#productDetails_techSpec_section_1, '
        '#productDetails_detailBullets_sections1, '
        '.prodDetTable'
    )
    DETAIL_BULLET_SELECTORS = (
        '#detailBullets_feature_div li, '
        '#detailBulletsWrapper_feature_div li'
    )

    BREADCRUMB_SELECTORS = '#wayfinding-breadcrumbs_container, .a-breadcrumb'
    BOOK_LANDMARK_SELECTORS = '#bookDescription, #rpiContainer, #bookEditionBadge, #tmmSwatches'
    FORMAT_SWITCHER_SELECTORS = '#tmmSwatches, #mediaTab_heading'

    # Byline wording around the brand name
    BYLINE_PREFIXES = [
        re.compile(r'^Visit the\s+', re.IGNORECASE),
        re.compile(r'^Brand:\s*', re.IGNORECASE),
    ]
    BYLINE_SUFFIXES = [
        re.compile(r'\s+Store$', re.IGNORECASE),
    ]

    BOOK_FORMATS = re.compile(r'\b(kindle|paperback|hardcover|audiobook|mass market)\b', re.IGNORECASE)
    BOOKS_CATEGORY = re.compile(r'\bbooks\b', re.IGNORECASE)

    # Separators left in front of detail-bullet values (colon, bidi marks)
    _BULLET_VALUE_LEAD = re.compile(r'^[\s:\u200e\u200f]+')
    _BULLET_LABEL_TAIL = re.compile(r'[:\s\u200e\u200f]+$')

    def __init__(self, soup: BeautifulSoup):
        """
        Initialize the HTML parser.

        Args:
            soup: BeautifulSoup object of the page
        """
        self.soup = soup

    def first_text(self, selectors: List[str]) -> str:
        """Return the text of the first selector that matches with non-empty text."""
        for selector in selectors:
            element = self.soup.select_one(selector)
            if element:
                text = self._clean_text(element.get_text())
                if text:
                    return text
        return ""

    def extract_title(self) -> str:
        """
        Extract product title.

        Returns:
            Product title or empty string
        """
        return self.first_text(self.TITLE_SELECTORS)

    def extract_byline_brand(self) -> str:
        """
        Extract brand from the byline link under the title.

        Returns:
            Brand name with store/brand wording removed, or empty string
        """
        byline = self.soup.select_one('#bylineInfo')
        if not byline:
            return ""

        text = self._clean_text(byline.get_text())
        for pattern in self.BYLINE_PREFIXES + self.BYLINE_SUFFIXES:
            text = pattern.sub('', text)

        return text.strip()

    def extract_detail_field(self, *labels: str) -> str:
        """
        Look up a value in the product details, matched by label.

        A row matches when its label contains any of the given labels,
        case-insensitively. Two layouts are tried:
        1. Detail tables (<th>label</th><td>value</td>)
        2. Detail bullets (<li><span class="a-text-bold">label:</span> value</li>)

        Args:
            labels: Accepted label synonyms (e.g. "Brand", "Manufacturer")

        Returns:
            Field value or empty string
        """
        wanted = [label.lower() for label in labels]

        for table in self.soup.select(self.DETAIL_TABLE_SELECTORS):
            for row in table.find_all('tr'):
                th = row.find('th')
                td = row.find('td')
                if th and td:
                    label = self._clean_text(th.get_text()).lower()
                    if any(w in label for w in wanted):
                        return self._clean_text(td.get_text())

        for item in self.soup.select(self.DETAIL_BULLET_SELECTORS):
            bold = item.select_one('.a-text-bold')
            if not bold:
                continue
            label_text = bold.get_text()
            label = self._BULLET_LABEL_TAIL.sub('', label_text.strip()).lower()
            if any(w in label for w in wanted):
                full = item.get_text().replace(label_text, '', 1)
                return self._clean_text(self._BULLET_VALUE_LEAD.sub('', full))

        return ""

    def has_books_breadcrumb(self) -> bool:
        """Check whether the category trail mentions books."""
        breadcrumb = self.soup.select_one(self.BREADCRUMB_SELECTORS)
        return bool(breadcrumb and self.BOOKS_CATEGORY.search(breadcrumb.get_text()))

    def has_book_landmarks(self) -> bool:
        """Check for page sections only rendered for books."""
        return self.soup.select_one(self.BOOK_LANDMARK_SELECTORS) is not None

    def has_book_formats(self) -> bool:
        """Check whether the format switcher offers book formats."""
        formats = self.soup.select_one(self.FORMAT_SWITCHER_SELECTORS)
        return bool(formats and self.BOOK_FORMATS.search(formats.get_text()))

    def _clean_text(self, text: Optional[str]) -> str:
        """Clean and normalize text."""
        if not text:
            return ""
        return ' '.join(text.split()).strip()
