import re

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, declared_attr


# Constraint names used by Alembic migrations
NAMING_CONVENTION = {
     "ix": "ix_%(column_0_label)s",
     "uq": "uq_%(table_name)s_%(column_0_name)s",
     "ck": "ck_%(table_name)s_%(constraint_name)s",
     "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
     "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Provides the shared metadata and table naming.
     """
     metadata = MetaData(naming_convention=NAMING_CONVENTION)

     @declared_attr.directive
     def __tablename__(cls) -> str:
          """
          Automatically generate table name from class name.
          Example: LeaseAgreement -> lease_agreements
          """
          name = re.sub(r'(?<!^)(?=[A-Z])', '_', cls.__name__).lower()
          # Pluralize (simple version)
          if name.endswith('y'):
               return name[:-1] + 'ies'
          elif name.endswith('s'):
               return name + 'es'
          return name + 's'
