# kubra_market/init_tables.py

from kubra_market.db.session import engine
from kubra_market.db.base import Base  # imports every model

def init_db():
    print("Creating database tables...")
    # creates missing tables only, existing ones are left alone
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")

if __name__ == "__main__":
    init_db()
