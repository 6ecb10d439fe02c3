"""URL slug helper."""
import re
import unicodedata


def slugify(value: str, max_length: int = 200) -> str:
    """Lower-case, ASCII-only, hyphen-separated slug.

    Examples:
        slugify("Brand & Web Design") -> "brand-web-design"
        slugify("  Café Déjà Vu ")   -> "cafe-deja-vu"
    """
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug[:max_length].rstrip("-")
