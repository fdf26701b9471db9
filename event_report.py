import argparse
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from event_api import (
    API_BASE_URI,
    REQUEST_TIMEOUT_SECONDS,
    build_session,
    fetch_all,
)
from event_dates import (
    first_date,
    is_on_sale,
    last_date,
    next_date,
    now_local,
)

# ---- Config ----
HTML_OUTPUT_DIR = str(Path(__file__).resolve().parent / "public")
REPORT_FILENAME = "events.html"
NO_EVENTS_TEXT = "No events to show"

DEFAULT_CONFIG: Dict[str, Any] = {
    "base_url": API_BASE_URI,
    "output_dir": HTML_OUTPUT_DIR,
    "timeout": REQUEST_TIMEOUT_SECONDS,
}


def load_config(path: Optional[str]) -> Dict[str, Any]:
    cfg = dict(DEFAULT_CONFIG)
    if not path:
        return cfg
    p = Path(path)
    if not p.exists():
        return cfg
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        print(f"⚠️  Could not read config {path} (using defaults).")
        return cfg
    if not isinstance(data, dict):
        return cfg

    for key in ("base_url", "output_dir"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            cfg[key] = value.strip()
    try:
        timeout = float(data.get("timeout", REQUEST_TIMEOUT_SECONDS))
        if timeout > 0:
            cfg["timeout"] = timeout
    except (TypeError, ValueError):
        pass
    return cfg


# ---------------------------
# Utilities
# ---------------------------
def same_id(a: Any, b: Any) -> bool:
    """Exact id match: 1, "1", 1.0 and True are all different ids."""
    return type(a) is type(b) and a == b


def html_escape(s: Any) -> str:
    s = "" if s is None else str(s)
    return (
        s.replace("&", "&amp;")
         .replace("<", "&lt;")
         .replace(">", "&gt;")
         .replace('"', "&quot;")
         .replace("'", "&#39;")
    )


# ---------------------------
# Event lookup
# ---------------------------
def find_event(events: Sequence[Dict[str, Any]], event_id: Any) -> Optional[Dict[str, Any]]:
    for ev in events:
        if same_id(ev.get("id"), event_id):
            return ev
    return None


def title_of(events: Sequence[Dict[str, Any]], event_id: Any) -> Optional[str]:
    ev = find_event(events, event_id)
    if ev is None:
        return None
    title = ev.get("title")
    if title is None:
        return None
    return str(title)


# ---------------------------
# Aggregation
# ---------------------------
@dataclass
class EventAggregate:
    dates: List[Any] = field(default_factory=list)
    venue: Any = None
    ad: int = 0


def sort_venues(venues: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(venues, key=lambda v: str(v.get("title") or ""))


def filter_on_sale(
    events: Sequence[Dict[str, Any]], now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """Events whose startSelling has passed but whose stopSelling hasn't."""
    now = now or now_local()
    return [ev for ev in events if is_on_sale(ev, now)]


def aggregate_instances(instances: Sequence[Dict[str, Any]]) -> Dict[Any, EventAggregate]:
    """
    Fold instances into one record per event id, in first-seen order.

    Every instance adds its start date; the venue is taken from the last
    instance seen for the event; ad counts instances flagged as audio
    described.
    """
    out: Dict[Any, EventAggregate] = {}
    for inst in instances:
        event_id = (inst.get("event") or {}).get("id")
        if event_id is None:
            continue
        agg = out.get(event_id)
        if agg is None:
            agg = out[event_id] = EventAggregate()
        agg.dates.append(inst.get("start"))
        agg.venue = (inst.get("venue") or {}).get("id")
        if inst.get("attribute_audioDescribed") is True:
            agg.ad += 1
    return out


# ---------------------------
# HTML Report
# ---------------------------
def render_event_item(
    event_id: Any, title: Optional[str], agg: EventAggregate, now: datetime
) -> str:
    return (
        f"<li>Event: {html_escape(title)}<br>"
        f"id: {html_escape(event_id)}<br>"
        f"First instance: {html_escape(first_date(agg.dates))} <br>"
        f"Next instance: {html_escape(next_date(agg.dates, now))} <br>"
        f"Last instance: {html_escape(last_date(agg.dates))} <br>"
        f"Instance count: {len(agg.dates)} <br>"
        f"Audio Described instance count: {agg.ad} <br></li>"
    )


def render_report_html(
    venues: Sequence[Dict[str, Any]],
    on_sale_events: Sequence[Dict[str, Any]],
    aggregates: Dict[Any, EventAggregate],
    now: Optional[datetime] = None,
) -> str:
    """
    Nested list: one <li> per venue (in the order given) holding one <li>
    per on-sale event held there. Venues without such events are left out.
    """
    now = now or now_local()
    html = "<ul>"
    for venue in venues:
        items: List[str] = []
        for event_id, agg in aggregates.items():
            if not same_id(agg.venue, venue.get("id")):
                continue
            if find_event(on_sale_events, event_id) is None:
                continue
            items.append(render_event_item(event_id, title_of(on_sale_events, event_id), agg, now))

        if not items:
            continue
        html += f"<li>{html_escape(venue.get('title'))}:<ul>"
        html += "".join(items)
        html += "</ul></li>"
    html += "</ul>"
    return html


def process_collected_data(
    events: Optional[Sequence[Dict[str, Any]]],
    venues: Optional[Sequence[Dict[str, Any]]],
    instances: Optional[Sequence[Dict[str, Any]]],
    now: Optional[datetime] = None,
) -> str:
    if not events or not venues or not instances:
        return NO_EVENTS_TEXT

    now = now or now_local()
    return render_report_html(
        sort_venues(venues),
        filter_on_sale(events, now),
        aggregate_instances(instances),
        now,
    )


def write_report_file(report_html: str, output_dir: str, filename: str = REPORT_FILENAME) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    path = out_dir / filename
    path.write_text(report_html, encoding="utf-8")
    return path


# ---------------------------
# Main run
# ---------------------------
def run_once(
    base_url: str = API_BASE_URI,
    output_dir: str = HTML_OUTPUT_DIR,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
    now: Optional[datetime] = None,
) -> Path:
    with build_session() as session:
        print(f"Fetching events, venues and instances from {base_url}...")
        collections = fetch_all(session, base_url, timeout)

    for name, records in collections._asdict().items():
        if records is None:
            print(f"   {name}: unavailable")
        else:
            print(f"   {name}: {len(records)}")

    html = process_collected_data(
        collections.events,
        collections.venues,
        collections.instances,
        now,
    )
    path = write_report_file(html, output_dir)

    print("")
    print(f"Report written: {path}")
    return path


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render the on-sale events report.")
    parser.add_argument("--config", help="JSON file with base_url, output_dir and timeout")
    parser.add_argument("--output-dir")
    parser.add_argument("--base-url")
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    if args.output_dir:
        cfg["output_dir"] = args.output_dir
    if args.base_url:
        cfg["base_url"] = args.base_url

    run_once(cfg["base_url"], cfg["output_dir"], cfg["timeout"])


if __name__ == "__main__":
    main()
