import pytest

from models.errors import DimensionMismatchError, InvalidRangeError
from services.image_service import ImageService
from services.split_view_service import SplitViewService


@pytest.fixture
def service() -> SplitViewService:
    return SplitViewService()


def test_half_split(service, make_solid):
    out = service.split_view(make_solid(2, 4, (10, 10, 10)), make_solid(2, 4, (20, 20, 20)), 50)
    assert [px[0] for px in out.to_list()[1]] == [10, 10, 20, 20]


def test_split_column_rounds_half_up(service):
    assert service.split_column(3, 50) == 2
    assert service.split_column(10, 34) == 3
    assert service.split_column(10, 35) == 4


def test_zero_ratio_gives_overlay(service, random_image):
    other = ImageService().flip_horizontal(random_image)
    assert service.split_view(random_image, other, 0) == other


def test_full_ratio_gives_base(service, random_image):
    other = ImageService().flip_horizontal(random_image)
    assert service.split_view(random_image, other, 100) == random_image


@pytest.mark.parametrize("ratio", [-1, 100.5, 250])
def test_ratio_out_of_range(service, random_image, ratio):
    with pytest.raises(InvalidRangeError):
        service.split_view(random_image, random_image, ratio)


def test_dimension_mismatch(service, make_solid):
    with pytest.raises(DimensionMismatchError):
        service.split_view(make_solid(2, 4, (0, 0, 0)), make_solid(2, 5, (0, 0, 0)), 50)


def test_preview_puts_result_left_and_source_right(service, make_solid):
    source = make_solid(1, 4, (100, 100, 100))
    out = service.preview(source, lambda image: ImageService.brighten(image, 10), 25)
    assert [px[0] for px in out.to_list()[0]] == [110, 100, 100, 100]


def test_preview_validates_ratio_before_running(service, make_solid):
    calls = []

    def operation(image):
        calls.append(image)
        return image

    with pytest.raises(InvalidRangeError):
        service.preview(make_solid(1, 1, (0, 0, 0)), operation, 101)
    assert calls == []
