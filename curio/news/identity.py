import hashlib


def derive_article_id(link: str) -> str:
    """
    Content-addressed id for an article: hex MD5 of the link's UTF-8 bytes.

    The link is hashed exactly as given. Links that differ only cosmetically
    (case, trailing slash, tracking parameters) produce different ids.
    """
    return hashlib.md5(link.encode("utf-8")).hexdigest()
