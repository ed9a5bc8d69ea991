"""Tests for the built-in scene catalog."""

from __future__ import annotations

import pytest

from luminari.core.exceptions import ValidationError
from luminari.data.scenes import SCENES, get_scene, get_scene_progress, is_last_scene
from luminari.data.shadows import default_registry
from luminari.models.enums import SceneType


class TestSceneCatalog:
    """Tests for the catalog accessors."""

    def test_every_scene_type_present(self) -> None:
        """Test the journey covers all scene types."""
        assert {scene.type for scene in SCENES} == set(SceneType)

    def test_combat_scenes_reference_registered_shadows(self) -> None:
        """Test every combat scene names an archetype the registry knows."""
        registry = default_registry()

        for scene in SCENES:
            if scene.type == SceneType.COMBAT:
                assert scene.shadow_type in registry

    def test_get_scene(self) -> None:
        """Test scenes are returned by index."""
        assert get_scene(0).id == "social-encounter"

    @pytest.mark.parametrize("index", [-1, len(SCENES)])
    def test_get_scene_out_of_range(self, index: int) -> None:
        """Test out-of-range indexes raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            get_scene(index)

        assert exc_info.value.details["invalid_value"] == index

    def test_progress(self) -> None:
        """Test progress is one-based."""
        progress = get_scene_progress(0)

        assert progress.current == 1
        assert progress.total == len(SCENES)

    def test_last_scene(self) -> None:
        """Test only the final index is the last scene."""
        assert is_last_scene(len(SCENES) - 1)
        assert not is_last_scene(0)
