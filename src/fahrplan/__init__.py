"""Fahrplan - terminal viewer for conference schedules.

Loads a CCC-style schedule.xml and lets you browse it with:
- A time-ordered grid of concurrently running events
- A single-event detail page with abstract, description and speakers
- Keyboard navigation shared between both views
"""

__version__ = "0.1.0"
