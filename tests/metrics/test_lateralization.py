"""
Tests for the lateralization indices.
"""
import pytest

from brainstats.data.regions import Region
from brainstats.ingest import HemisphereDataset
from brainstats.metrics import (
    calculate_handedness_index,
    calculate_dominant_eye_index,
    calculate_preferred_nostril_index,
    calculate_language_output_lateralization,
    calculate_language_input_lateralization,
    calculate_language_lateralization_index,
)

MOTOR_SUBREGIONS = (Region.BA4A, Region.BA4P, Region.BA3B)


class TestHandedness:
    """Tests for the Handedness Index."""

    def test_without_subregions_is_neutral(self, dkt_only_dataset):
        result = calculate_handedness_index(dkt_only_dataset)

        assert result.value == 0.0
        assert result.percentile == 50
        assert result.details == ()

    def test_left_motor_cortex_one_sd_larger(self, mean_hemisphere, mean_subregions, make_measurement):
        left_sub = dict(mean_subregions)
        for region in MOTOR_SUBREGIONS:
            left_sub[str(region)] = make_measurement(region, thickness_sd=1, area_sd=1)
        data = HemisphereDataset(
            left=mean_hemisphere, right=mean_hemisphere,
            left_sub=left_sub, right_sub=mean_subregions,
        )

        result = calculate_handedness_index(data)

        # Thickness and area weights sum to 0.70 in every motor subregion
        assert result.value == pytest.approx(0.7)
        assert result.value > 0
        assert result.percentile == 79
        assert [d.region for d in result.details] == ["BA4a_exvivo", "BA4p_exvivo", "BA3b_exvivo"]

    def test_folding_term_with_curvature(self, mean_hemisphere, make_measurement, curvature_reference):
        fold = curvature_reference["BA4a_exvivo"]["folding_index"]
        left_sub = {
            str(r): make_measurement(r, folding_index=curvature_reference[str(r)]["folding_index"].mean)
            for r in MOTOR_SUBREGIONS
        }
        right_sub = dict(left_sub)
        left_sub["BA4a_exvivo"] = make_measurement(Region.BA4A, folding_index=fold.mean + fold.std)
        data = HemisphereDataset(
            left=mean_hemisphere, right=mean_hemisphere,
            left_sub=left_sub, right_sub=right_sub,
        )

        # 0.35 region weight × 0.30 folding weight
        assert calculate_handedness_index(data).value == pytest.approx(0.105)

    def test_folding_term_needs_both_hemispheres(self, mean_hemisphere, mean_subregions, make_measurement):
        left_sub = dict(mean_subregions)
        left_sub["BA4a_exvivo"] = make_measurement(Region.BA4A, folding_index=60)
        data = HemisphereDataset(
            left=mean_hemisphere, right=mean_hemisphere,
            left_sub=left_sub, right_sub=mean_subregions,
        )
        assert calculate_handedness_index(data).value == 0.0

    def test_unparseable_folding_index_is_logged(self, mean_hemisphere, make_measurement, curvature_reference, caplog):
        right_sub = {
            str(r): make_measurement(r, folding_index=curvature_reference[str(r)]["folding_index"].mean)
            for r in MOTOR_SUBREGIONS
        }
        left_sub = dict(right_sub)
        left_sub["BA4a_exvivo"] = make_measurement(Region.BA4A, thickness_sd=2, folding_index=float("nan"))
        data = HemisphereDataset(
            left=mean_hemisphere, right=mean_hemisphere,
            left_sub=left_sub, right_sub=right_sub,
        )

        with caplog.at_level("DEBUG", logger="brainstats.metrics.modules.lateralization_indices"):
            result = calculate_handedness_index(data)

        # Thickness still counts: 0.35 region weight × 0.35 thickness weight × 2 SD
        assert result.value == pytest.approx(0.245)
        assert "Dropping folding term for BA4a_exvivo" in caplog.text


class TestDominantEye:
    """Tests for the Dominant Eye Index."""

    def test_reference_means(self, dkt_only_dataset):
        result = calculate_dominant_eye_index(dkt_only_dataset)
        assert result.value == 0.0
        assert result.percentile == 50

    def test_left_pericalcarine_thicker(self, mean_hemisphere, make_measurement):
        left = dict(mean_hemisphere)
        left["pericalcarine"] = make_measurement(Region.PERICALCARINE, thickness_sd=1)
        result = calculate_dominant_eye_index(HemisphereDataset(left=left, right=mean_hemisphere))

        assert result.value == pytest.approx(0.644)
        assert result.details[0].contrib_left == pytest.approx(0.644)
        assert result.details[0].contrib_right == 0.0


class TestPreferredNostril:
    """Tests for the Preferred Nostril Index."""

    def test_piriform_uses_entorhinal_proxy(self, dkt_only_dataset):
        result = calculate_preferred_nostril_index(dkt_only_dataset)

        regions = [d.region for d in result.details]
        assert "piriform" in regions
        assert "entorhinal" in regions
        assert result.value == 0.0
        assert result.percentile == 50

    def test_sign_is_right_minus_left(self, mean_hemisphere, make_measurement):
        shifted = dict(mean_hemisphere)
        shifted["entorhinal"] = make_measurement(
            Region.ENTORHINAL, thickness_sd=1, area_sd=1, volume_sd=1
        )

        left_larger = calculate_preferred_nostril_index(
            HemisphereDataset(left=shifted, right=mean_hemisphere)
        )
        right_larger = calculate_preferred_nostril_index(
            HemisphereDataset(left=mean_hemisphere, right=shifted)
        )

        # Entorhinal (0.45) plus its piriform proxy (0.05)
        assert left_larger.value == pytest.approx(-0.5)
        assert left_larger.percentile == 30
        assert right_larger.value == pytest.approx(0.5)
        assert right_larger.percentile == 70
        assert right_larger.z_score == right_larger.value


class TestLanguageLateralization:
    """Tests for the language output / input ratios and their blend."""

    def test_output_neutral_without_subregions(self, dkt_only_dataset):
        result = calculate_language_output_lateralization(dkt_only_dataset)
        assert result.value == 0.0
        assert result.details == ()

    def test_output_ratio(self, mean_hemisphere, mean_subregions, make_measurement):
        left_sub = dict(mean_subregions)
        left_sub["BA44_exvivo"] = make_measurement(Region.BA44, thickness_sd=1, area_sd=1)
        data = HemisphereDataset(
            left=mean_hemisphere, right=mean_hemisphere,
            left_sub=left_sub, right_sub=mean_subregions,
        )

        result = calculate_language_output_lateralization(data)

        # 0.45 / (0.45 + 0 + 0.001)
        assert result.value == pytest.approx(0.998)
        assert result.percentile == 99

    def test_input_at_reference_means(self, dkt_only_dataset):
        result = calculate_language_input_lateralization(dkt_only_dataset)

        assert result.value == 0.0
        assert result.percentile == 50
        assert result.z_score == 0.0
        assert len(result.details) == 5

    def test_input_ratio_bounded(self, mean_hemisphere, make_measurement):
        right = dict(mean_hemisphere)
        right["superiortemporal"] = make_measurement(
            Region.SUPERIOR_TEMPORAL, thickness_sd=3, area_sd=3, volume_sd=3
        )
        result = calculate_language_input_lateralization(
            HemisphereDataset(left=mean_hemisphere, right=right)
        )
        assert -1 <= result.value < 0
        assert result.percentile == 1

    def test_combined_blends_available_parts(self, mean_hemisphere, make_measurement):
        left = dict(mean_hemisphere)
        left["superiortemporal"] = make_measurement(
            Region.SUPERIOR_TEMPORAL, thickness_sd=1, area_sd=1, volume_sd=1
        )
        data = HemisphereDataset(left=left, right=mean_hemisphere)

        lang_input = calculate_language_input_lateralization(data)
        combined = calculate_language_lateralization_index(data)

        assert lang_input.value == pytest.approx(0.997)
        assert combined.value == pytest.approx(0.399)
        assert all(d.region.endswith(" (Input)") for d in combined.details)

    def test_combined_tags_both_parts(self, mean_dataset):
        result = calculate_language_lateralization_index(mean_dataset)
        regions = [d.region for d in result.details]

        assert "BA44_exvivo (Output)" in regions
        assert "superiortemporal (Input)" in regions
        assert result.value == 0.0

    def test_combined_output_share(self, mean_hemisphere, make_measurement):
        left = dict(mean_hemisphere)
        left["superiortemporal"] = make_measurement(
            Region.SUPERIOR_TEMPORAL, thickness_sd=1, area_sd=1, volume_sd=1
        )
        data = HemisphereDataset(left=left, right=mean_hemisphere)

        result = calculate_language_lateralization_index(data, output_share=0.0)
        assert result.value == pytest.approx(0.997)

    def test_combined_neutral_without_data(self):
        result = calculate_language_lateralization_index(HemisphereDataset(left={}, right={}))
        assert result.value == 0.0
        assert result.percentile == 50
        assert result.details == ()
