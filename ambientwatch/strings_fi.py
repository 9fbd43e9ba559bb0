"""Finnish (fi) strings for AmbientWatch UI."""

STRINGS: dict = {
    # ── Levels ────────────────────────────────────────────────────────
    "level_good": "Hyvä",
    "level_moderate": "Kohtalainen",
    "level_unhealthy": "Epäterveellinen",
    "level_high": "Korkea",

    # ── Metric cards ──────────────────────────────────────────────────
    "card_pm25": "PM2.5",
    "card_co2": "CO₂",
    "card_temperature": "Lämpötila",
    "card_humidity": "Kosteus",
    "card_voc": "VOC-indeksi",
    "card_nox": "NOx-indeksi",
    "card_pm1": "PM1.0",

    # ── Chart ─────────────────────────────────────────────────────────
    "series_pm25": "PM2.5",
    "series_co2": "CO₂",
    "series_temperature": "Lämpö",
    "series_humidity": "Kosteus",
    "series_voc": "VOC",
    "series_nox": "NOx",
    "series_pm1": "PM1.0",
    "chart_title": "HISTORIA — KAIKKI ANTURIT",
    "chart_readings": lambda n, **_: f"{n} lukema" if n == 1 else f"{n} lukemaa",
    "chart_loading": "Ladataan API-historiaa…",
    "chart_error": "API-historian lataus epäonnistui, yritä uudelleen a:lla",
    "chart_idle": "Lataa API-historia painamalla a",
    "chart_collecting": "Kerätään dataa…",

    # ── Connection status ─────────────────────────────────────────────
    "status_connected": "Yhdistetty",
    "status_error": "Yhteysvirhe",
    "status_connecting": "Yhdistetään…",

    # ── TUI ───────────────────────────────────────────────────────────
    "tui_subtitle": "Ilmanlaatumittari opetukseen",
    "tui_device": "Laite",
    "tui_updated": "päivitetty {timestamp}",
    "tui_mode_live": "Live",
    "tui_mode_api": "API-historia",
    "tui_history_refresh_hint": "Historia on jo ladattu, päivitä r:llä",
    "tui_history_busy": "Historia latautuu vielä",
    "tui_connecting_to": "Yhdistetään osoitteeseen {address}…",
    "tui_unknown_command": "Tuntematon komento: {cmd}",
    "tui_download_started": "Ladataan {url}…",
    "tui_download_saved": "Tallennettu {path}",
    "tui_download_failed": "Lataus epäonnistui: {error}",
    "tui_cmd_connect": "c <osoite>=yhdistä",
    "tui_cmd_live": "l=live",
    "tui_cmd_api": "a=API-historia",
    "tui_cmd_refresh": "r=päivitä",
    "tui_cmd_pointer": ", . < >=osoitin x=piilota",
    "tui_cmd_download": "d [hak]=CSV",
    "tui_cmd_quit": "q=lopeta",

    # ── Console ───────────────────────────────────────────────────────
    "console_press_enter": "Paina Enter tulostaaksesi lukemat (Ctrl+C lopettaa)",
    "console_connection_error": "Yhteysvirhe: ei vastausta osoitteesta {address}",
    "console_no_data_yet": "Ei vielä dataa",
    "console_col_metric": "Suure",
    "console_col_value": "Arvo",
    "console_col_level": "Taso",
    "console_header": "Ambient {address}",
}
