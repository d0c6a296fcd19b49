"""Menu-side event handlers.

These handlers keep the menu store consistent with the bus store. The two
stores are owned independently, so removal of a bus reaches the menu only
through a ``BusDeletedEvent``.
"""

from typing import TYPE_CHECKING

from loguru import logger
from sqlmodel import select

from bus_system.database import SessionFactory, borrow_db_session
from bus_system.event_bus.core import EventHandler
from bus_system.events.types import BusDeletedEvent
from bus_system.models.db_model import Category

if TYPE_CHECKING:
    from loguru import Logger


class BusDeletedEventHandler(EventHandler[BusDeletedEvent]):
    """Delete all categories, and with them all menu items, of a deleted bus.

    Each ``handle`` call opens its own session from ``session_factory`` so no
    other handler of the same publish shares its transaction.

    Failures are logged and swallowed. There is no retry: categories left
    behind by a failed cleanup stay orphaned until removed out of band.
    """

    def __init__(self, session_factory: SessionFactory = borrow_db_session, log: "Logger | None" = None):
        self.session_factory = session_factory
        self.log = log if log is not None else logger.bind(component="menu_cleanup")

    async def handle(self, event: BusDeletedEvent) -> None:
        """Handle the BusDeletedEvent.

        Args:
            event: The bus deleted event carrying the id of the removed bus
        """
        self.log.info(f"Handling BusDeletedEvent for bus {event.bus_id}")

        try:
            with self.session_factory() as session:
                try:
                    categories = session.exec(select(Category).where(Category.bus_id == event.bus_id)).all()

                    if not categories:
                        self.log.info(f"No categories found for bus {event.bus_id}")
                        return

                    for category in categories:
                        session.delete(category)
                    session.commit()
                except Exception:
                    session.rollback()
                    raise

                self.log.info(f"Deleted {len(categories)} categories and their menu items for bus {event.bus_id}")
        except Exception:
            self.log.exception(f"Error handling BusDeletedEvent for bus {event.bus_id}")
