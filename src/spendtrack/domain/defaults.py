"""Default currency and the starter category tree."""

import os
import uuid

from spendtrack.domain.entities import Category, SubCategory, Taxonomy

DEFAULT_CURRENCY = "BYN"


def resolve_currency(currency: str | None = None) -> str:
    """Return the currency to stamp on parsed expenses.

    Checks the explicit argument, then SPENDTRACK_CURRENCY, then falls back
    to DEFAULT_CURRENCY.
    """
    if currency:
        return currency.strip().upper()
    return os.environ.get("SPENDTRACK_CURRENCY", DEFAULT_CURRENCY).strip().upper() or DEFAULT_CURRENCY


def new_id() -> str:
    """Generate an opaque identifier for a new entity."""
    return str(uuid.uuid4())


# (category name, [(subcategory name, comma-separated keywords), ...])
INITIAL_CATEGORIES = [
    (
        "Повседневные",
        [
            ("Продукты", "грин, копеечка, простор, маяк, евроопт, белмаркет"),
            ("Транспорт", "метро, маршрутка, поезд, автобус, троллейбус, трамвай"),
            ("Еда вне дома", "еда"),
            ("Бары и рестораны", "бар, ресторан"),
            ("Развлечения", "Развлечения, Развлечение"),
            ("Регулярные", "регуляр"),
            ("Здоровье", "здоровье"),
            ("Одежда", "одежда"),
            ("Алкоголь", "пиво"),
            ("Подарки", "подарок, подарки"),
            ("Прочее", ""),
        ],
    ),
    (
        "Крупные",
        [
            ("Путешествия", "Путешествия"),
            ("Одежда", "Одежда"),
            ("Гаджеты", "Гаджеты"),
            ("Праздники", "Праздики"),
            ("Красота и здоровье", "Крастота и здоровье"),
            ("Образование", "Образование"),
            ("WB", "WB, вб"),
        ],
    ),
    (
        "Квартира",
        [
            ("Коммунальные платежи", "ком плат"),
            ("Электроэнергия", "свет"),
            ("Ремонт", "ремонт"),
            ("Интернет", "инет, интернет"),
            ("Природный газ", "газ"),
            ("Все для дома", "все для дома"),
        ],
    ),
]


def _split_keywords(keywords: str) -> tuple[str, ...]:
    cleaned = {k.strip().lower() for k in keywords.split(",")}
    return tuple(sorted(k for k in cleaned if k))


def default_taxonomy() -> Taxonomy:
    """Build the starter category tree with freshly generated IDs.

    Every call returns new IDs so a reset never resurrects references held
    by existing expenses.
    """
    categories = []
    for order, (name, subcategories) in enumerate(INITIAL_CATEGORIES):
        subs = tuple(
            sorted(
                (
                    SubCategory(id=new_id(), name=sub_name, keywords=_split_keywords(keywords))
                    for sub_name, keywords in subcategories
                ),
                key=lambda sub: sub.name.lower(),
            )
        )
        categories.append(Category(id=new_id(), name=name, order=order, subcategories=subs))
    return tuple(categories)
