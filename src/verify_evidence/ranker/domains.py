"""Domain lists used by the relevance scorer.

Hosts are compared without a ``www.`` prefix; a listed domain also matches
its subdomains (``edition.bbc.com`` matches ``bbc.com``).
"""

RELIABLE_DOMAINS: tuple[str, ...] = (
    "reuters.com",
    "apnews.com",
    "bbc.com",
    "bbc.co.uk",
    "nytimes.com",
    "wsj.com",
    "theguardian.com",
    "aljazeera.com",
    "npr.org",
    "pbs.org",
    "economist.com",
    "bloomberg.com",
    "ft.com",
    "afp.com",
)

FACT_CHECK_DOMAINS: tuple[str, ...] = (
    "snopes.com",
    "politifact.com",
    "factcheck.org",
    "fullfact.org",
)

UNRELIABLE_DOMAINS: tuple[str, ...] = (
    "infowars.com",
    "naturalnews.com",
    "beforeitsnews.com",
)

OFFICIAL_SUFFIXES: tuple[str, ...] = (".gov", ".edu")

SUSPICIOUS_PATTERNS: tuple[str, ...] = (
    "clickbait",
    "viral",
    "shocking",
    "unbelievable",
    "free-money",
)
