"""Schema of the structured report encoding.

The message types are declared in code as a ``FileDescriptorProto`` and turned
into protobuf classes at first use, so no generated ``_pb2`` module is needed.
Scalar fields use proto2 ``optional`` semantics: a field that was never set is
absent from the wire and ``HasField`` reports it as such.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence, Tuple

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import message_factory

PACKAGE = "metricslog"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_F = descriptor_pb2.FieldDescriptorProto
OPTIONAL = _F.LABEL_OPTIONAL
REPEATED = _F.LABEL_REPEATED

# (name, number, field type, label, message type name)
FieldSpec = Tuple[str, int, int, int, str]


def _scalar(name: str, number: int, field_type: int) -> FieldSpec:
    return (name, number, field_type, OPTIONAL, "")


def _message(name: str, number: int, type_name: str, label: int = OPTIONAL) -> FieldSpec:
    return (name, number, _F.TYPE_MESSAGE, label, f".{PACKAGE}.{type_name}")


_SCHEMA: Sequence[Tuple[str, Sequence[FieldSpec]]] = (
    ("FieldTrial", (
        _scalar("name_id", 1, _F.TYPE_FIXED32),
        _scalar("group_id", 2, _F.TYPE_FIXED32),
    )),
    ("Plugin", (
        _scalar("name", 1, _F.TYPE_STRING),
        _scalar("filename", 2, _F.TYPE_STRING),
        _scalar("version", 3, _F.TYPE_STRING),
        _scalar("is_disabled", 4, _F.TYPE_BOOL),
    )),
    ("PluginStability", (
        _message("plugin", 1, "Plugin"),
        _scalar("launch_count", 2, _F.TYPE_INT64),
        _scalar("instance_count", 3, _F.TYPE_INT64),
        _scalar("crash_count", 4, _F.TYPE_INT64),
        _scalar("name_hash", 5, _F.TYPE_STRING),
    )),
    ("Stability", (
        _scalar("launch_count", 1, _F.TYPE_INT64),
        _scalar("crash_count", 2, _F.TYPE_INT64),
        _scalar("incomplete_shutdown_count", 3, _F.TYPE_INT64),
        _scalar("breakpad_registration_success_count", 4, _F.TYPE_INT64),
        _scalar("breakpad_registration_failure_count", 5, _F.TYPE_INT64),
        _scalar("debugger_present_count", 6, _F.TYPE_INT64),
        _scalar("debugger_not_present_count", 7, _F.TYPE_INT64),
        _scalar("page_load_count", 8, _F.TYPE_INT64),
        _scalar("renderer_crash_count", 9, _F.TYPE_INT64),
        _scalar("extension_renderer_crash_count", 10, _F.TYPE_INT64),
        _scalar("renderer_hang_count", 11, _F.TYPE_INT64),
        _scalar("child_process_crash_count", 12, _F.TYPE_INT64),
        _scalar("other_user_crash_count", 13, _F.TYPE_INT64),
        _scalar("kernel_crash_count", 14, _F.TYPE_INT64),
        _scalar("unclean_system_shutdown_count", 15, _F.TYPE_INT64),
        _scalar("uptime_sec", 16, _F.TYPE_INT64),
        _message("plugin_stability", 17, "PluginStability", REPEATED),
    )),
    ("PerformanceStatistics", (
        _scalar("graphics_score", 1, _F.TYPE_FLOAT),
        _scalar("gaming_score", 2, _F.TYPE_FLOAT),
        _scalar("overall_score", 3, _F.TYPE_FLOAT),
    )),
    ("Graphics", (
        _scalar("vendor_id", 1, _F.TYPE_UINT32),
        _scalar("device_id", 2, _F.TYPE_UINT32),
        _scalar("driver_version", 3, _F.TYPE_STRING),
        _scalar("driver_date", 4, _F.TYPE_STRING),
        _message("performance_statistics", 5, "PerformanceStatistics"),
    )),
    ("Hardware", (
        _scalar("cpu_architecture", 1, _F.TYPE_STRING),
        _scalar("system_ram_mb", 2, _F.TYPE_INT64),
        _message("gpu", 3, "Graphics"),
        _scalar("primary_screen_width", 4, _F.TYPE_INT32),
        _scalar("primary_screen_height", 5, _F.TYPE_INT32),
        _scalar("screen_count", 6, _F.TYPE_INT32),
    )),
    ("OS", (
        _scalar("name", 1, _F.TYPE_STRING),
        _scalar("version", 2, _F.TYPE_STRING),
    )),
    ("BookmarkLocation", (
        _scalar("name", 1, _F.TYPE_STRING),
        _scalar("folder_count", 2, _F.TYPE_INT32),
        _scalar("item_count", 3, _F.TYPE_INT32),
    )),
    ("SystemProfile", (
        _scalar("app_version", 1, _F.TYPE_STRING),
        _scalar("install_date", 2, _F.TYPE_INT64),
        _scalar("application_locale", 3, _F.TYPE_STRING),
        _message("hardware", 4, "Hardware"),
        _message("os", 5, "OS"),
        _message("stability", 6, "Stability"),
        _message("plugin", 7, "Plugin", REPEATED),
        _message("field_trial", 8, "FieldTrial", REPEATED),
        _message("bookmark_location", 9, "BookmarkLocation", REPEATED),
        _scalar("keyword_count", 10, _F.TYPE_INT32),
    )),
    ("Suggestion", (
        _scalar("provider", 1, _F.TYPE_INT32),
        _scalar("result_type", 2, _F.TYPE_INT32),
        _scalar("relevance", 3, _F.TYPE_INT32),
        _scalar("is_starred", 4, _F.TYPE_BOOL),
    )),
    ("OmniboxEvent", (
        _scalar("time", 1, _F.TYPE_INT64),
        _scalar("tab_id", 2, _F.TYPE_INT32),
        _scalar("typed_length", 3, _F.TYPE_INT32),
        _scalar("num_typed_terms", 4, _F.TYPE_INT32),
        _scalar("selected_index", 5, _F.TYPE_INT32),
        _scalar("completed_length", 6, _F.TYPE_INT32),
        _scalar("typing_duration_ms", 7, _F.TYPE_INT64),
        _scalar("input_type", 8, _F.TYPE_INT32),
        _message("suggestion", 9, "Suggestion", REPEATED),
    )),
    ("MetricsLogRecord", (
        _scalar("client_id", 1, _F.TYPE_STRING),
        _scalar("session_id", 2, _F.TYPE_INT32),
        _message("system_profile", 3, "SystemProfile"),
        _message("omnibox_event", 4, "OmniboxEvent", REPEATED),
    )),
)


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto()
    fdp.name = "metricslog_record.proto"
    fdp.package = PACKAGE
    fdp.syntax = "proto2"
    for message_name, fields in _SCHEMA:
        msg = fdp.message_type.add()
        msg.name = message_name
        for name, number, field_type, label, type_name in fields:
            field = msg.field.add()
            field.name = name
            field.number = number
            field.type = field_type
            field.label = label
            if type_name:
                field.type_name = type_name
    return fdp


def _message_class(pool: descriptor_pool.DescriptorPool, name: str) -> type:
    descriptor = pool.FindMessageTypeByName(f"{PACKAGE}.{name}")
    if hasattr(message_factory, "GetMessageClass"):
        return message_factory.GetMessageClass(descriptor)
    return message_factory.MessageFactory(pool).GetPrototype(descriptor)


@lru_cache(maxsize=1)
def _pool() -> descriptor_pool.DescriptorPool:
    pool = descriptor_pool.DescriptorPool()
    pool.Add(_file_descriptor())
    return pool


@lru_cache(maxsize=1)
def _record_class() -> type:
    return _message_class(_pool(), "MetricsLogRecord")


def new_record():
    """Return an empty top-level structured record."""
    return _record_class()()


def parse_record(payload: bytes):
    """Decode structured bytes produced by a locked report."""
    record = new_record()
    record.ParseFromString(payload)
    return record


def fits_int64(value: int) -> bool:
    """Whether ``value`` can be stored in an ``int64`` field."""
    return INT64_MIN <= value <= INT64_MAX


__all__ = ["INT64_MAX", "INT64_MIN", "fits_int64", "new_record", "parse_record"]
