"""Public interface for the studio acoustics measurement core."""

from .acoustics.heatmap import HEATMAP_BANDS_HZ, HeatmapCell, build_degradation_heatmap
from .acoustics.modes import RoomMode, compute_room_modes, room_modes_for
from .acoustics.response import (
    THIRD_OCTAVE_FREQUENCIES_HZ,
    FrequencyPoint,
    points_to_rows,
    synthesize_frequency_response,
)
from .export import CSV_MIME_TYPE, generate_filename, json_safe, records_to_csv
from .measurements import (
    FrequencyResponseRecord,
    parse_frequency_response_csv,
    records_to_rows,
)
from .positions import (
    STUDIO_8_POSITIONS,
    STUDIO_8_REFERENCE,
    MeasurementPosition,
    PositionCatalog,
    PositionSpec,
    sti_color,
    sti_quality_label,
)
from .serialization import (
    dashboard_json_schemas,
    dataclass_schema,
    frequency_response_record_schema,
    heatmap_cell_schema,
    measurement_position_schema,
    room_mode_schema,
    smaart_bundle_schema,
)
from .smaart import (
    STI_REFERENCE_FREQUENCIES_HZ,
    SmaartMeasurementBundle,
    parse_smaart_log,
)
from .treatment import (
    DEFAULT_PANEL_COUNTS,
    PANEL_KINDS,
    RT60_TARGET_S,
    PanelConfig,
    TreatmentSummary,
    average_rt60,
    predict_rt60,
    summarise_treatment,
)
from .units import (
    CONVERSIONS,
    ROOM_PROFILES,
    SPEED_OF_SOUND_FT_S,
    SPEED_OF_SOUND_M_S,
    STUDIO_8,
    RoomProfile,
    feet_to_meters,
    meters_to_feet,
)

__all__ = [
    "CONVERSIONS",
    "SPEED_OF_SOUND_FT_S",
    "SPEED_OF_SOUND_M_S",
    "RoomProfile",
    "STUDIO_8",
    "ROOM_PROFILES",
    "feet_to_meters",
    "meters_to_feet",
    "MeasurementPosition",
    "PositionSpec",
    "PositionCatalog",
    "STUDIO_8_POSITIONS",
    "STUDIO_8_REFERENCE",
    "sti_color",
    "sti_quality_label",
    "FrequencyResponseRecord",
    "parse_frequency_response_csv",
    "records_to_rows",
    "STI_REFERENCE_FREQUENCIES_HZ",
    "SmaartMeasurementBundle",
    "parse_smaart_log",
    "RoomMode",
    "compute_room_modes",
    "room_modes_for",
    "FrequencyPoint",
    "THIRD_OCTAVE_FREQUENCIES_HZ",
    "synthesize_frequency_response",
    "points_to_rows",
    "HeatmapCell",
    "HEATMAP_BANDS_HZ",
    "build_degradation_heatmap",
    "PANEL_KINDS",
    "DEFAULT_PANEL_COUNTS",
    "RT60_TARGET_S",
    "PanelConfig",
    "TreatmentSummary",
    "average_rt60",
    "predict_rt60",
    "summarise_treatment",
    "CSV_MIME_TYPE",
    "records_to_csv",
    "generate_filename",
    "json_safe",
    "dataclass_schema",
    "frequency_response_record_schema",
    "smaart_bundle_schema",
    "room_mode_schema",
    "heatmap_cell_schema",
    "measurement_position_schema",
    "dashboard_json_schemas",
]
