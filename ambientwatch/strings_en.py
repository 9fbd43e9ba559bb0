"""English (en) strings for AmbientWatch UI."""

STRINGS: dict = {
    # ── Levels ────────────────────────────────────────────────────────
    "level_good": "Good",
    "level_moderate": "Moderate",
    "level_unhealthy": "Unhealthy",
    "level_high": "High",

    # ── Metric cards ──────────────────────────────────────────────────
    "card_pm25": "PM2.5",
    "card_co2": "CO₂",
    "card_temperature": "Temperature",
    "card_humidity": "Humidity",
    "card_voc": "VOC Index",
    "card_nox": "NOx Index",
    "card_pm1": "PM1.0",

    # ── Chart ─────────────────────────────────────────────────────────
    "series_pm25": "PM2.5",
    "series_co2": "CO₂",
    "series_temperature": "Temp",
    "series_humidity": "Humidity",
    "series_voc": "VOC",
    "series_nox": "NOx",
    "series_pm1": "PM1.0",
    "chart_title": "HISTORY — ALL SENSORS",
    "chart_readings": lambda n, **_: f"{n} reading" if n == 1 else f"{n} readings",
    "chart_loading": "Loading API history…",
    "chart_error": "Failed to load API history, press a to retry",
    "chart_idle": "Press a to load API history",
    "chart_collecting": "Collecting data…",

    # ── Connection status ─────────────────────────────────────────────
    "status_connected": "Live",
    "status_error": "Connection error",
    "status_connecting": "Connecting…",

    # ── TUI ───────────────────────────────────────────────────────────
    "tui_subtitle": "Air Quality Monitor for Education",
    "tui_device": "Device",
    "tui_updated": "updated {timestamp}",
    "tui_mode_live": "Live",
    "tui_mode_api": "API History",
    "tui_history_refresh_hint": "History already loaded, press r to refresh",
    "tui_history_busy": "History is still loading",
    "tui_connecting_to": "Connecting to {address}…",
    "tui_unknown_command": "Unknown command: {cmd}",
    "tui_download_started": "Downloading {url}…",
    "tui_download_saved": "Saved {path}",
    "tui_download_failed": "Download failed: {error}",
    "tui_cmd_connect": "c <address>=connect",
    "tui_cmd_live": "l=live",
    "tui_cmd_api": "a=API history",
    "tui_cmd_refresh": "r=refresh",
    "tui_cmd_pointer": ", . < >=pointer x=hide",
    "tui_cmd_download": "d [dir]=CSV",
    "tui_cmd_quit": "q=quit",

    # ── Console ───────────────────────────────────────────────────────
    "console_press_enter": "Press Enter to print the current reading (Ctrl+C to quit)",
    "console_connection_error": "Connection error: no response from {address}",
    "console_no_data_yet": "No data yet",
    "console_col_metric": "Metric",
    "console_col_value": "Value",
    "console_col_level": "Level",
    "console_header": "Ambient {address}",
}
