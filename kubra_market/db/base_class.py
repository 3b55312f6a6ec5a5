from sqlalchemy.orm import as_declarative


@as_declarative()
class Base:
    """Declarative base for every model; each model names its own __tablename__."""
