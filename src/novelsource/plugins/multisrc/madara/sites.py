"""
Sites running the Madara theme.
"""

from novelsource.plugins.registry import hub
from novelsource.schemas import SourceConfig, SourceOptions

SITES = [
    SourceConfig(
        source_id=23,
        template="madara",
        base_url="https://tunovelaligera.com",
        source_name="TuNovelaLigera",
        options=SourceOptions(
            language="es",
            reverse_chapters=True,
            novels_path="novelas",
        ),
    ),
]

hub.add_sites(SITES)
