"""
Floper — Configuration: paths, storage credentials, batch sizes.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with FLOPER_DATA_DIR for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("FLOPER_DATA_DIR", str(Path.home() / "Floper")))
REPORTS_FOLDER = _data_dir / "reports"

# ---------------------------------------------------------------------------
# Remote table store (Supabase)
# ---------------------------------------------------------------------------
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

# Load every collection from the remote store at startup
PRELOAD_ON_STARTUP = os.environ.get("FLOPER_PRELOAD", "1") not in ("0", "false", "no")

# ---------------------------------------------------------------------------
# Batch sizes
# ---------------------------------------------------------------------------
CHUNK_SIZE = 500    # rows per insert call
PAGE_SIZE = 1000    # rows per range query (Supabase default max rows)

ORDER_COLUMN = "created_at"
KEY_COLUMN = "id"

# ---------------------------------------------------------------------------
# Remote tables, one per record kind
# ---------------------------------------------------------------------------
STOCK_TABLE = "stock_items"
SALES_TABLE = "sales_items"
PERSONNEL_TABLE = "personnel_data"

# ---------------------------------------------------------------------------
# Column mapping from spreadsheet headers → storage columns
# ---------------------------------------------------------------------------
STOCK_COLUMN_MAP = {
    "Marka": "marka",
    "Ürün Grubu": "urun_grubu",
    "Ürün Kodu": "urun_kodu",
    "Renk Kodu": "renk_kodu",
    "Beden": "beden",
    "Envanter": "envanter",
    "Barkod": "barkod",
    "Sezon": "sezon",
}

SALES_COLUMN_MAP = {
    "Marka": "marka",
    "Ürün Grubu": "urun_grubu",
    "Ürün Kodu": "urun_kodu",
    "Renk Kodu": "renk_kodu",
    "Beden": "beden",
    "Envanter": "envanter",
    "Sezon": "sezon",
    "Satış Miktarı": "satis_miktari",
    "Satış (VD)": "satis_vd",
}

PERSONNEL_COLUMN_MAP = {
    "personelAdi": "personel_adi",
    "marka": "marka",
    "urunKodu": "urun_kodu",
    "renkKodu": "renk_kodu",
    "satisAdeti": "satis_adeti",
    "satisFiyati": "satis_fiyati",
}

# ---------------------------------------------------------------------------
# Report defaults
# ---------------------------------------------------------------------------
TOP_N_DEFAULT = 10
