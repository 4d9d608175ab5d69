"""
RLS Linter: analyzer identity and default guarded configuration.
"""

ANALYZER_NAME: str = "rlslinter"
SUPPRESSION_MARKER: str = "nolint"

MESSAGE_ID: str = "W9801"
MESSAGE_SYMBOL: str = "rls-unsafe-call"

ANALYZER_DOC: str = """rlslinter detects unsupported session methods that fail with the org-wrapping transaction system.

The lemmata session wrapper automatically wraps queries in transactions and commits them immediately.
This breaks methods that hand back rows to be read after the transaction closes, causing
Row-Level Security (RLS) to fail and potentially returning empty or incorrect results.
"""

# Modules that declare the session/query types themselves.
DEFAULT_GUARDED_MODULES: frozenset[str] = frozenset(
    {
        "sqlalchemy.orm.session",
        "sqlalchemy.orm.query",
        "sqlalchemy.engine.base",
        "sqlalchemy.ext.asyncio.session",
    }
)

# Both spellings the organisation wrapper has shipped under.
DEFAULT_GUARDED_MODULE_PREFIXES: tuple[str, ...] = (
    "lemmata.db.orm",
    "lemmata_db.orm",
)

# [tool.<section>] in pyproject.toml
PYPROJECT_SECTION: str = "rlslinter"
