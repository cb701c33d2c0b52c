"""Country and city lookup for address pickers."""

from pydantic import BaseModel, ConfigDict

OTHER_COUNTRY_CODE = "OTHER"


class Country(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    cities: tuple[str, ...] = ()


_COUNTRIES = [
    Country(code="AM", name="Armenia", cities=("Gyumri", "Vanadzor", "Yerevan")),
    Country(code="AZ", name="Azerbaijan", cities=("Baku", "Ganja", "Sumqayit")),
    Country(code="BY", name="Belarus", cities=("Brest", "Gomel", "Grodno", "Minsk", "Vitebsk")),
    Country(code="DE", name="Germany", cities=("Berlin", "Frankfurt", "Hamburg", "Munich")),
    Country(code="GE", name="Georgia", cities=("Batumi", "Kutaisi", "Rustavi", "Tbilisi", "Zugdidi")),
    Country(code="KZ", name="Kazakhstan", cities=("Almaty", "Astana", "Karaganda", "Shymkent")),
    Country(
        code="RU",
        name="Russia",
        cities=(
            "Kazan",
            "Moscow",
            "Nizhny Novgorod",
            "Novosibirsk",
            "Saint Petersburg",
            "Sochi",
            "Yekaterinburg",
        ),
    ),
    Country(code="TR", name="Turkey", cities=("Ankara", "Antalya", "Istanbul", "Izmir")),
]


def get_countries() -> list[Country]:
    """Known countries sorted by name."""
    return sorted(_COUNTRIES, key=lambda c: c.name)


def get_country_by_code(code: str) -> Country | None:
    return next((c for c in _COUNTRIES if c.code == code), None)


def get_country_by_name(name: str) -> Country | None:
    name = (name or "").strip().lower()
    return next((c for c in _COUNTRIES if c.name.lower() == name), None)


def get_cities(country: str) -> list[str]:
    """Cities of a country given by code or name, sorted alphabetically."""
    found = get_country_by_code(country) or get_country_by_name(country)
    return sorted(found.cities) if found else []
