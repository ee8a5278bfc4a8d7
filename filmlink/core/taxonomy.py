"""Genre taxonomies and the mappings between them.

The primary catalog labels genres in Polish free text and, in its JSON API,
by numeric id. Both are normalized to ``CatalogGenre``. Each ``CatalogGenre``
projects onto at most one ``SharedCategory``; the ones with no sensible
counterpart (costume, satire, silent, ...) are dropped during projection.

Two call sites, two error policies:
- ``lookup_genre_label`` is used while parsing a scraped label and raises
  ``UnmappedCategoryLabel`` for anything not in the table.
- ``project_to_shared_category`` / ``project_genres`` never raise; unmapped
  genres are filtered out.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import IntEnum, StrEnum
from types import MappingProxyType

import structlog

from filmlink.core.errors import UnmappedCategoryLabel
from filmlink.core.metrics import dropped_categories_total

logger = structlog.get_logger("filmlink.taxonomy")


class SharedCategory(StrEnum):
    """Catalog-agnostic genre set both catalogs project onto."""

    ACTION = "action"
    ADVENTURE = "adventure"
    ANIMATION = "animation"
    COMEDY = "comedy"
    CRIME = "crime"
    DOCUMENTARY = "documentary"
    DRAMA = "drama"
    FAMILY = "family"
    FANTASY = "fantasy"
    HISTORY = "history"
    HORROR = "horror"
    MUSIC = "music"
    MYSTERY = "mystery"
    ROMANCE = "romance"
    SCI_FI = "sci-fi"
    THRILLER = "thriller"
    WAR = "war"
    WESTERN = "western"


class CatalogGenre(IntEnum):
    """Genres of the primary catalog, valued by the catalog's own ids."""

    ACTION = 28  # akcja
    ADULT_ANIMATION = 77  # animacja dla dorosłych
    ADVENTURE = 20  # przygodowy
    ANIMATION = 2  # animacja
    ANIME = 66  # anime
    BIBLICAL = 55  # biblijny
    BIOGRAPHY = 3  # biograficzny
    CATASTROPHE = 40  # katastroficzny
    CHILDREN = 4  # dla dzieci
    CHRISTMAS = 78  # świąteczny
    COMEDY = 13  # komedia
    COSTUME = 14  # kostiumowy
    COURTROOM_DRAMA = 65  # dramat sądowy
    CRIME = 15  # kryminał
    CRIMINAL_COMEDY = 58  # komedia kryminalna
    DARK_COMEDY = 47  # czarna komedia
    DOCUMENTARY = 5  # dokumentalny
    DOCUMENTED = 57  # dokumentalizowany
    DRAMA = 6  # dramat
    EROTIC = 7  # erotyczny
    FAIRY_TALE = 42  # baśń
    FAMILY = 8  # familijny
    FANTASY = 9  # fantasy
    FICTIONALIZED_DOCUMENTARY = 70  # fabularyzowany dok.
    FILM_NOIR = 27  # film-noir
    GANGSTER = 53  # gangsterski
    GROTESQUE = 60  # groteska filmowa
    HISTORICAL = 11  # historyczny
    HISTORICAL_DRAMA = 59  # dramat historyczny
    HORROR = 12  # horror
    MARTIAL_ARTS = 72  # sztuki walki
    MELODRAMA = 16  # melodramat
    MORAL = 19  # obyczajowy
    MORAL_COMEDY = 37  # komedia obyczajowa
    MUSICAL = 17  # musical
    MUSICALLY = 44  # muzyczny
    NATURE = 73  # przyrodniczy
    POETIC = 62  # poetycki
    POLITICAL = 43  # polityczny
    PROPAGANDA = 76  # propagandowy
    PSYCHOLOGICAL = 38  # psychologiczny
    RELIGIOUS = 51  # religijny
    ROMANCE = 32  # romans
    ROMANTIC_COMEDY = 30  # komedia romantyczna
    SATIRE = 39  # satyra
    SCI_FI = 33  # sci-fi
    SENSATIONAL = 22  # sensacyjny
    SHIVER = 46  # dreszczowiec
    SHORT = 50  # krótkometrażowy
    SILENT = 67  # niemy
    SPORTS = 61  # sportowy
    SPY = 63  # szpiegowski
    SURREALISTIC = 10  # surrealistyczny
    THRILLER = 24  # thriller
    TRUE_CRIME = 80  # true crime
    WAR = 26  # wojenny
    WESTERN = 25  # western
    XXX = 71  # xxx
    YOUTH = 41  # dla młodzieży

    @classmethod
    def from_id(cls, genre_id: int) -> CatalogGenre:
        """Resolve a numeric genre id from the catalog's JSON API.

        Raises:
            UnmappedCategoryLabel: If the id is unknown
        """
        try:
            return cls(genre_id)
        except ValueError:
            raise UnmappedCategoryLabel(str(genre_id)) from None


# Lower-cased, trimmed label -> genre. Includes the catalog's abbreviations
# and the misspelling it has served for political films.
LABEL_TO_GENRE: Mapping[str, CatalogGenre] = MappingProxyType(
    {
        "akcja": CatalogGenre.ACTION,
        "animacja dla dorosłych": CatalogGenre.ADULT_ANIMATION,
        "animacja": CatalogGenre.ANIMATION,
        "anime": CatalogGenre.ANIME,
        "baśń": CatalogGenre.FAIRY_TALE,
        "biblijny": CatalogGenre.BIBLICAL,
        "biograficzny": CatalogGenre.BIOGRAPHY,
        "czarna komedia": CatalogGenre.DARK_COMEDY,
        "dla dzieci": CatalogGenre.CHILDREN,
        "dla młodzieży": CatalogGenre.YOUTH,
        "dokumentalizowany": CatalogGenre.DOCUMENTED,
        "dokumentalny": CatalogGenre.DOCUMENTARY,
        "dramat historyczny": CatalogGenre.HISTORICAL_DRAMA,
        "dramat obyczajowy": CatalogGenre.MORAL,
        "dramat sądowy": CatalogGenre.COURTROOM_DRAMA,
        "dramat": CatalogGenre.DRAMA,
        "dreszczowiec": CatalogGenre.SHIVER,
        "erotyczny": CatalogGenre.EROTIC,
        "fabularyzowany dok.": CatalogGenre.FICTIONALIZED_DOCUMENTARY,
        "familijny": CatalogGenre.FAMILY,
        "fantasy": CatalogGenre.FANTASY,
        "film-noir": CatalogGenre.FILM_NOIR,
        "gangsterski": CatalogGenre.GANGSTER,
        "groteska filmowa": CatalogGenre.GROTESQUE,
        "historyczny": CatalogGenre.HISTORICAL,
        "horror": CatalogGenre.HORROR,
        "katastroficzny": CatalogGenre.CATASTROPHE,
        "komedia kryminalna": CatalogGenre.CRIMINAL_COMEDY,
        "komedia obyczajowa": CatalogGenre.MORAL_COMEDY,
        "komedia obycz.": CatalogGenre.MORAL_COMEDY,
        "komedia romantyczna": CatalogGenre.ROMANTIC_COMEDY,
        "komedia rom.": CatalogGenre.ROMANTIC_COMEDY,
        "komedia": CatalogGenre.COMEDY,
        "kostiumowy": CatalogGenre.COSTUME,
        "kryminał": CatalogGenre.CRIME,
        "krótkometrażowy": CatalogGenre.SHORT,
        "melodramat": CatalogGenre.MELODRAMA,
        "musical": CatalogGenre.MUSICAL,
        "muzyczny": CatalogGenre.MUSICALLY,
        "niemy": CatalogGenre.SILENT,
        "obyczajowy": CatalogGenre.MORAL,
        "poetycki": CatalogGenre.POETIC,
        "polityczny": CatalogGenre.POLITICAL,
        "politiczny": CatalogGenre.POLITICAL,
        "propagandowy": CatalogGenre.PROPAGANDA,
        "przygodowy": CatalogGenre.ADVENTURE,
        "przyrodniczy": CatalogGenre.NATURE,
        "psychologiczny": CatalogGenre.PSYCHOLOGICAL,
        "religijny": CatalogGenre.RELIGIOUS,
        "romans": CatalogGenre.ROMANCE,
        "satyra": CatalogGenre.SATIRE,
        "sci-fi": CatalogGenre.SCI_FI,
        "sensacyjny": CatalogGenre.SENSATIONAL,
        "sportowy": CatalogGenre.SPORTS,
        "surrealistyczny": CatalogGenre.SURREALISTIC,
        "szpiegowski": CatalogGenre.SPY,
        "sztuki walki": CatalogGenre.MARTIAL_ARTS,
        "thriller": CatalogGenre.THRILLER,
        "true crime": CatalogGenre.TRUE_CRIME,
        "western": CatalogGenre.WESTERN,
        "wojenny": CatalogGenre.WAR,
        "xxx": CatalogGenre.XXX,
        "świąteczny": CatalogGenre.CHRISTMAS,
    }
)


def _invert(groups: Mapping[SharedCategory, tuple[CatalogGenre, ...]]) -> dict[CatalogGenre, SharedCategory]:
    table: dict[CatalogGenre, SharedCategory] = {}
    for category, genres in groups.items():
        for genre in genres:
            table[genre] = category
    return table


# Genres missing here are deliberately unmapped: costume, xxx, short,
# erotic, martial arts, poetic, political, propaganda, moral,
# psychological, satire, silent, sports.
GENRE_TO_SHARED: Mapping[CatalogGenre, SharedCategory] = MappingProxyType(
    _invert(
        {
            SharedCategory.ACTION: (CatalogGenre.ACTION,),
            SharedCategory.ANIMATION: (
                CatalogGenre.ADULT_ANIMATION,
                CatalogGenre.ANIMATION,
                CatalogGenre.ANIME,
            ),
            SharedCategory.ADVENTURE: (CatalogGenre.ADVENTURE,),
            SharedCategory.HISTORY: (
                CatalogGenre.BIBLICAL,
                CatalogGenre.HISTORICAL,
                CatalogGenre.RELIGIOUS,
                CatalogGenre.HISTORICAL_DRAMA,
            ),
            SharedCategory.FANTASY: (CatalogGenre.FANTASY,),
            SharedCategory.FAMILY: (
                CatalogGenre.CHILDREN,
                CatalogGenre.YOUTH,
                CatalogGenre.FAMILY,
                CatalogGenre.CHRISTMAS,
                CatalogGenre.FAIRY_TALE,
            ),
            SharedCategory.DRAMA: (
                CatalogGenre.DRAMA,
                CatalogGenre.COURTROOM_DRAMA,
                CatalogGenre.MELODRAMA,
                CatalogGenre.CATASTROPHE,
                CatalogGenre.GROTESQUE,
            ),
            SharedCategory.HORROR: (CatalogGenre.HORROR,),
            SharedCategory.CRIME: (
                CatalogGenre.CRIME,
                CatalogGenre.TRUE_CRIME,
                CatalogGenre.FILM_NOIR,
                CatalogGenre.GANGSTER,
                CatalogGenre.CRIMINAL_COMEDY,
            ),
            SharedCategory.COMEDY: (
                CatalogGenre.COMEDY,
                CatalogGenre.DARK_COMEDY,
                CatalogGenre.MORAL_COMEDY,
                CatalogGenre.ROMANTIC_COMEDY,
            ),
            SharedCategory.DOCUMENTARY: (
                CatalogGenre.DOCUMENTARY,
                CatalogGenre.DOCUMENTED,
                CatalogGenre.BIOGRAPHY,
                CatalogGenre.NATURE,
                CatalogGenre.FICTIONALIZED_DOCUMENTARY,
            ),
            SharedCategory.MUSIC: (CatalogGenre.MUSICAL, CatalogGenre.MUSICALLY),
            SharedCategory.ROMANCE: (CatalogGenre.ROMANCE,),
            SharedCategory.SCI_FI: (CatalogGenre.SCI_FI,),
            SharedCategory.MYSTERY: (CatalogGenre.SPY, CatalogGenre.SURREALISTIC),
            SharedCategory.THRILLER: (
                CatalogGenre.THRILLER,
                CatalogGenre.SHIVER,
                CatalogGenre.SENSATIONAL,
            ),
            SharedCategory.WAR: (CatalogGenre.WAR,),
            SharedCategory.WESTERN: (CatalogGenre.WESTERN,),
        }
    )
)

# Genre chips shown by the secondary catalog. Labels not listed (Adult,
# Game-Show, News, Reality-TV, Short, Sport, Talk-Show) are filtered.
SECONDARY_LABEL_TO_SHARED: Mapping[str, SharedCategory] = MappingProxyType(
    {
        "action": SharedCategory.ACTION,
        "adventure": SharedCategory.ADVENTURE,
        "animation": SharedCategory.ANIMATION,
        "biography": SharedCategory.DOCUMENTARY,
        "comedy": SharedCategory.COMEDY,
        "crime": SharedCategory.CRIME,
        "documentary": SharedCategory.DOCUMENTARY,
        "drama": SharedCategory.DRAMA,
        "family": SharedCategory.FAMILY,
        "fantasy": SharedCategory.FANTASY,
        "film-noir": SharedCategory.CRIME,
        "history": SharedCategory.HISTORY,
        "horror": SharedCategory.HORROR,
        "music": SharedCategory.MUSIC,
        "musical": SharedCategory.MUSIC,
        "mystery": SharedCategory.MYSTERY,
        "romance": SharedCategory.ROMANCE,
        "sci-fi": SharedCategory.SCI_FI,
        "thriller": SharedCategory.THRILLER,
        "war": SharedCategory.WAR,
        "western": SharedCategory.WESTERN,
    }
)


def _normalize_label(label: str) -> str:
    return label.strip().lower()


def lookup_genre_label(label: str) -> CatalogGenre:
    """Resolve one scraped genre label.

    Args:
        label: Raw label text, e.g. " Komedia rom. "

    Returns:
        The matching CatalogGenre

    Raises:
        UnmappedCategoryLabel: If the label is not in the table
    """
    try:
        return LABEL_TO_GENRE[_normalize_label(label)]
    except KeyError:
        logger.error("Unknown genre label", label=label)
        raise UnmappedCategoryLabel(label) from None


def parse_genre_labels(labels: Iterable[str]) -> list[CatalogGenre]:
    """Resolve every scraped genre label of one title, failing on the first unknown one."""
    return [lookup_genre_label(label) for label in labels if label.strip()]


def project_to_shared_category(genre: CatalogGenre) -> SharedCategory | None:
    """Project a catalog genre onto the shared set; None means dropped."""
    return GENRE_TO_SHARED.get(genre)


def project_genres(genres: Iterable[CatalogGenre]) -> list[SharedCategory]:
    """Project a title's genres, silently dropping unmapped ones.

    The result keeps first-seen order without duplicates, so "komedia" and
    "czarna komedia" together give a single COMEDY.
    """
    projected: list[SharedCategory] = []
    for genre in genres:
        category = project_to_shared_category(genre)
        if category is None:
            dropped_categories_total.inc()
            continue
        if category not in projected:
            projected.append(category)
    return projected


def shared_category_from_label(label: str) -> SharedCategory | None:
    """Map a secondary-catalog genre label ("Sci-Fi", "Biography") onto the shared set."""
    return SECONDARY_LABEL_TO_SHARED.get(_normalize_label(label))
