from content.formatting import format_date, format_file_size, format_relative_time
from content.slugs import generate_slug

__all__ = ["format_date", "format_file_size", "format_relative_time", "generate_slug"]
