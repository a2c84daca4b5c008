"""Unit tests for detection response normalization."""
import json
import math

from species.detection import (
    RawDetection,
    normalize_detections,
    parse_detection_response,
)


class TestRawDetection:
    """Tests for decoding single result items."""

    def test_label_priority(self):
        # Assert
        assert RawDetection.decode({"species": "pike", "name": "Esox lucius"}).label == "pike"
        assert RawDetection.decode({"name": "Esox lucius", "scientific_name": "x"}).label == "Esox lucius"
        assert RawDetection.decode({"scientific_name": "Perca fluviatilis"}).label == "Perca fluviatilis"
        assert RawDetection.decode({}).label == ""

    def test_confidence_from_accuracy_or_distance(self):
        # Assert
        assert RawDetection.decode({"accuracy": 0.9}).confidence == 0.9
        assert RawDetection.decode({"distance": 0.25}).confidence == 0.75
        assert RawDetection.decode({"accuracy": 0.4, "distance": 0.0}).confidence == 0.4
        assert RawDetection.decode({}).confidence == 0.0

    def test_confidence_is_clamped(self):
        # Assert
        assert RawDetection.decode({"accuracy": 1.7}).confidence == 1.0
        assert RawDetection.decode({"distance": 1.5}).confidence == 0.0

    def test_malformed_fields_degrade(self):
        # Act
        raw = RawDetection.decode({"accuracy": "high", "name": {"x": 1}, "speciesId": 42})

        # Assert
        assert raw.confidence == 0.0
        assert raw.label == ""
        assert raw.species_id == "42"

    def test_non_mapping_item(self):
        # Act
        raw = RawDetection.decode("pike")

        # Assert
        assert raw.label == ""
        assert raw.confidence == 0.0

    def test_oversized_and_non_finite_numbers_degrade(self):
        # Arrange
        huge = json.loads('{"accuracy": 1' + '0' * 400 + '}')

        # Assert
        assert RawDetection.decode(huge).accuracy is None
        assert RawDetection.decode(huge).confidence == 0.0
        assert RawDetection.decode({"accuracy": math.inf, "distance": 0.3}).confidence == 0.7
        assert RawDetection.decode({"distance": -math.inf}).confidence == 0.0
        assert RawDetection.decode({"accuracy": math.nan}).confidence == 0.0


class TestNormalizeDetections:
    """Tests for ranking and resolution of a full response."""

    def test_ranks_by_confidence_across_metrics(self, resolver):
        # Arrange
        response = {"results": [
            {"name": "Perca fluviatilis", "distance": 0.2},
            {"species": "pike", "accuracy": 0.9},
        ]}

        # Act
        results = normalize_detections(response, 3, resolver)

        # Assert
        assert [r.resolved_species for r in results] == ["Hecht", "Barsch"]
        assert results[0].confidence == 0.9
        assert results[1].confidence == 0.8

    def test_truncates_to_top_k(self, resolver):
        # Arrange
        response = {"results": [{"species": "pike", "accuracy": a} for a in (0.1, 0.5, 0.3, 0.7)]}

        # Act
        results = normalize_detections(response, 2, resolver)

        # Assert
        assert [r.confidence for r in results] == [0.7, 0.5]

    def test_ties_keep_service_order(self, resolver):
        # Arrange
        response = {"results": [
            {"species": "pike", "accuracy": 0.5},
            {"species": "perch", "accuracy": 0.5},
        ]}

        # Act
        results = normalize_detections(response, 5, resolver)

        # Assert
        assert [r.raw_label for r in results] == ["pike", "perch"]

    def test_missing_or_invalid_results(self, resolver):
        # Assert
        assert normalize_detections({}, 3, resolver) == []
        assert normalize_detections({"results": None}, 3, resolver) == []
        assert normalize_detections({"results": "pike"}, 3, resolver) == []
        assert normalize_detections(None, 3, resolver) == []

    def test_non_positive_top_k(self, resolver):
        # Arrange
        response = {"results": [{"species": "pike", "accuracy": 0.9}]}

        # Assert
        assert normalize_detections(response, 0, resolver) == []

    def test_unresolved_label_is_kept(self, resolver):
        # Arrange
        response = {"results": [{"species": "sea_monster", "accuracy": 0.6, "species_id": "77"}]}

        # Act
        [candidate] = normalize_detections(response, 3, resolver)

        # Assert
        assert candidate.resolved_species == "Sea Monster"
        assert candidate.matched is False
        assert candidate.external_id == "77"
        assert candidate.raw == {"species": "sea_monster", "accuracy": 0.6, "species_id": "77"}

    def test_oversized_accuracy_does_not_break_ranking(self, resolver):
        # Arrange
        response = json.loads(
            '{"results": [{"name": "Esox lucius", "accuracy": 1' + '0' * 400 + '},'
            ' {"name": "Perca fluviatilis", "accuracy": 0.4}]}'
        )

        # Act
        results = normalize_detections(response, 3, resolver)

        # Assert
        assert [(r.resolved_species, r.confidence) for r in results] == [("Barsch", 0.4), ("Hecht", 0.0)]


class TestParseDetectionResponse:
    """Tests for the response wrapper."""

    def test_reported_count_is_kept(self, resolver):
        # Arrange
        response = {"detections": 5, "results": [{"species": "pike", "accuracy": 0.9}]}

        # Act
        parsed = parse_detection_response(response, 3, resolver)

        # Assert
        assert parsed.detections == 5
        assert len(parsed.results) == 1
        assert not parsed.is_empty

    def test_count_defaults_to_items(self, resolver):
        # Act
        parsed = parse_detection_response({"results": [{}, {}]}, 1, resolver)

        # Assert
        assert parsed.detections == 2
        assert len(parsed.results) == 1

    def test_empty_response(self, resolver):
        # Act
        parsed = parse_detection_response({"detections": 0, "results": []}, 3, resolver)

        # Assert
        assert parsed.is_empty
        assert parsed.detections == 0

    def test_non_finite_or_negative_count_falls_back_to_items(self, resolver):
        # Arrange
        items = [{"species": "pike", "accuracy": 0.9}]

        # Act
        infinite = parse_detection_response({"detections": math.inf, "results": items}, 3, resolver)
        overflowing = parse_detection_response(json.loads('{"detections": 1e400, "results": []}'), 3, resolver)
        negative = parse_detection_response({"detections": -4, "results": items}, 3, resolver)

        # Assert
        assert infinite.detections == 1
        assert overflowing.detections == 0
        assert negative.detections == 1
