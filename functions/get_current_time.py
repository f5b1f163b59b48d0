from datetime import datetime, timezone


async def execute(utc_offset_hours=0):
    offset = float(utc_offset_hours or 0)
    now = datetime.now(timezone.utc).timestamp() + offset * 3600
    return {"time": datetime.fromtimestamp(now, timezone.utc).strftime("%Y-%m-%d %H:%M:%S"), "utc_offset_hours": offset}

details = {
    "type": "function",
    "function": {
        "name": "get_current_time",
        "description": "Get the current date and time, optionally shifted by a UTC offset in hours.",
        "parameters": {
            "type": "object",
            "properties": {
                "utc_offset_hours": {
                    "type": "number",
                    "description": "Hours to add to UTC, e.g. 2 for CEST",
                },
            },
            "required": [],
        },
    },
}

__all__ = ["execute", "details"]
