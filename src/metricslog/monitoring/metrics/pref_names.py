"""Names of the counter store entries read by the metrics log."""

# Required stability counters.
STABILITY_LAUNCH_COUNT = "stability.launch_count"
STABILITY_CRASH_COUNT = "stability.crash_count"

# Counters drained into every full stability element.
STABILITY_INCOMPLETE_SESSION_END_COUNT = "stability.incomplete_session_end_count"
STABILITY_BREAKPAD_REGISTRATION_SUCCESS = "stability.breakpad_registration_ok"
STABILITY_BREAKPAD_REGISTRATION_FAIL = "stability.breakpad_registration_fail"
STABILITY_DEBUGGER_PRESENT = "stability.debugger_present"
STABILITY_DEBUGGER_NOT_PRESENT = "stability.debugger_not_present"

# Optional (realtime) counters, emitted only when non-zero.
STABILITY_PAGE_LOAD_COUNT = "stability.page_load_count"
STABILITY_RENDERER_CRASH_COUNT = "stability.renderer_crash_count"
STABILITY_EXTENSION_RENDERER_CRASH_COUNT = "stability.extension_renderer_crash_count"
STABILITY_RENDERER_HANG_COUNT = "stability.renderer_hang_count"
STABILITY_CHILD_PROCESS_CRASH_COUNT = "stability.child_process_crash_count"

# ChromeOS family only.
STABILITY_OTHER_USER_CRASH_COUNT = "stability.other_user_crash_count"
STABILITY_KERNEL_CRASH_COUNT = "stability.kernel_crash_count"
STABILITY_SYSTEM_UNCLEAN_SHUTDOWN_COUNT = "stability.system_unclean_shutdowns"

# Persisted per-plugin stats and their dictionary keys.
STABILITY_PLUGIN_STATS = "stability.plugin_stats2"
STABILITY_PLUGIN_NAME = "name"
STABILITY_PLUGIN_LAUNCHES = "launches"
STABILITY_PLUGIN_INSTANCES = "instances"
STABILITY_PLUGIN_CRASHES = "crashes"

UNINSTALL_METRICS_UPTIME_SEC = "uninstall_metrics.uptime_sec"
METRICS_CLIENT_ID_TIMESTAMP = "user_experience_metrics.client_id_timestamp"

NUM_BOOKMARKS_ON_BOOKMARK_BAR = "num_bookmarks_on_bookmark_bar"
NUM_FOLDERS_ON_BOOKMARK_BAR = "num_folders_on_bookmark_bar"
NUM_BOOKMARKS_IN_OTHER_BOOKMARK_FOLDER = "num_bookmarks_in_other_bookmark_folder"
NUM_FOLDERS_IN_OTHER_BOOKMARK_FOLDER = "num_folders_in_other_bookmark_folder"
NUM_KEYWORDS = "num_keywords"

# Key prefix of per-profile entries in the profile metrics mapping.
PROFILE_PREFIX = "profile-"
