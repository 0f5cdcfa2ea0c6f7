import logging
from datetime import date, datetime, timedelta, timezone

from icalendar import Calendar, Event

logger = logging.getLogger(__name__)


def generate_timeline_ics(client_name: str, steps: list) -> bytes:
    """One all-day event per dated onboarding step, spanning start to end."""
    cal = Calendar()
    cal.add("prodid", "-//OnboardingHub//EN")
    cal.add("version", "2.0")
    cal.add("x-wr-calname", f"{client_name} onboarding")

    stamp = datetime.now(timezone.utc)
    for step in steps:
        if not step.start_date:
            continue
        try:
            start = date.fromisoformat(step.start_date[:10])
            end = date.fromisoformat(step.end_date[:10]) if step.end_date else start
        except ValueError:
            logger.warning("Skipping step %s with unparseable dates", step.id)
            continue
        if end < start:
            end = start

        event = Event()
        event.add("uid", f"{step.id}@onboarding-hub")
        event.add("dtstamp", stamp)
        event.add("summary", f"{step.title} ({client_name})")
        event.add("dtstart", start)
        # DTEND is exclusive for all-day events
        event.add("dtend", end + timedelta(days=1))

        description_parts = [f"Status: {step.status}"]
        if step.assigned_to:
            description_parts.append(f"Assigned to: {step.assigned_to}")
        if step.description:
            description_parts.append(step.description)
        event.add("description", "\n".join(description_parts))
        cal.add_component(event)

    return cal.to_ical()
