"""Create the demo user and sample tasks in the configured database."""
from taskgate.database import create_tables, get_session
from taskgate.main import configure_logging
from taskgate.seed import seed_demo_data

configure_logging()

# Create tables if not exist
create_tables()

with get_session() as session:
    seed_demo_data(session)
