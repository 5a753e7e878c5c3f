from pathlib import Path

DOCUMENTS_DIR = Path(Path.home(), "Documents")
DEFAULT_EVENTS_FILE = Path(DOCUMENTS_DIR, "almanak", "events.csv")

# Column order of the events file, also written as its header row
CSV_FIELDS = ("date", "description", "category")

DATE_FORMAT = "%Y-%m-%d"

# Separates primary and secondary category in the events file
STORED_CATEGORY_DELIMITER = "/"

# Separates primary and secondary category on the command line
INPUT_CATEGORY_DELIMITER = ","
