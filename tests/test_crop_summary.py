"""
Unit tests for the crop portfolio summary
"""

from unittest.mock import patch

from farm_intel.agents.crop_summary import crop_area, summarize_crops
from farm_intel.agents.yield_model import predict_yield
from farm_intel.models import CropEntity, CropStatus, CropsSummary


class TestSummarizeCrops:
    """Test cases for portfolio totals."""

    def test_counts_by_status(self):
        """Test total, active and harvested counts."""
        crops = [
            CropEntity(id="1", crop_type="rice"),
            CropEntity(id="2", crop_type="wheat", status=CropStatus.HARVESTED),
            CropEntity(id="3", crop_type="peas", status=CropStatus.FAILED),
            CropEntity(id="4", crop_type="onion"),
        ]
        summary = summarize_crops(crops)

        assert summary.total_crops == 4
        assert summary.active_crops == 2
        assert summary.harvested_crops == 1

    def test_investment_ignores_missing_and_negative(self):
        """Test only real investment amounts are added up."""
        crops = [
            CropEntity(id="1", crop_type="rice", investment_amount=20000),
            CropEntity(id="2", crop_type="wheat", investment_amount=None),
            CropEntity(id="3", crop_type="peas", investment_amount=-500),
            CropEntity(id="4", crop_type="onion", investment_amount=2500.5),
        ]

        assert summarize_crops(crops).total_investment == 22500.5

    @patch('farm_intel.agents.yield_model.logger')
    def test_revenue_only_for_listed_crops(self, mock_logger):
        """Test predictions for crops outside the portfolio are not counted."""
        crops = [CropEntity(id="1", crop_type="rice", farm_area_sqm=1000)]
        predictions = [
            predict_yield(crops[0]),
            predict_yield(CropEntity(id="other", crop_type="wheat", farm_area_sqm=1000)),
        ]
        summary = summarize_crops(crops, predictions)

        assert summary.total_predicted_revenue == predictions[0].predicted_revenue

    def test_area_prefers_detected(self):
        """Test detected area wins over declared, and missing area counts as 0."""
        crops = [
            CropEntity(id="1", crop_type="rice", farm_area_sqm=500, detected_area_sqm=700),
            CropEntity(id="2", crop_type="wheat", farm_area_sqm=300),
            CropEntity(id="3", crop_type="peas"),
            CropEntity(id="4", crop_type="onion", farm_area_sqm=float("inf")),
        ]

        assert [crop_area(c) for c in crops] == [700, 300, 0.0, 0.0]
        assert summarize_crops(crops).total_area_sqm == 1000

    def test_empty_portfolio(self):
        """Test no crops give all-zero totals."""
        assert summarize_crops([]) == CropsSummary(0, 0, 0, 0, 0, 0)
