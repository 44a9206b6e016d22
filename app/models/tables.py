"""
Tablas relacionales leídas por el leaderboard.

Solo se declaran las columnas que usa el cálculo de contribuciones.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, String, Table, Text, Uuid

metadata = MetaData()

PROJECT_STATUS_VERIFIED = "verified"
ECOSYSTEM_STATUS_ACTIVE = "active"


users = Table(
    "users",
    metadata,
    Column("id", Uuid(as_uuid=False), primary_key=True),
)

github_accounts = Table(
    "github_accounts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Uuid(as_uuid=False), ForeignKey("users.id"), nullable=False),
    Column("login", String(255), nullable=False, unique=True),
    Column("avatar_url", Text, nullable=True),
)

ecosystems = Table(
    "ecosystems",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("status", String(32), nullable=False),
)

projects = Table(
    "projects",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("ecosystem_id", Integer, ForeignKey("ecosystems.id"), nullable=True),
    Column("status", String(32), nullable=False),
)

github_issues = Table(
    "github_issues",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("project_id", Integer, ForeignKey("projects.id"), nullable=False),
    Column("author_login", String(255), nullable=True),
)

github_pull_requests = Table(
    "github_pull_requests",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("project_id", Integer, ForeignKey("projects.id"), nullable=False),
    Column("author_login", String(255), nullable=True),
)

# Los conteos agrupan por author_login, así que lo indexamos
Index("ix_github_issues_author_login", github_issues.c.author_login)
Index("ix_github_pull_requests_author_login", github_pull_requests.c.author_login)
