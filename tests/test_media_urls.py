from memories_bed.core.media_urls import (
    LIGHTBOX_SIZE, grid_thumbnail_url, optimized_image_url, thumbnail_url, video_poster_url,
)

IMAGE = "https://res.cloudinary.com/demo/image/upload/v17/memories/cake.png"
VIDEO = "https://res.cloudinary.com/demo/video/upload/v17/memories/party.MOV"


def test_thumbnail_inserts_resize_segment():
    assert thumbnail_url(IMAGE) == (
        "https://res.cloudinary.com/demo/image/upload/"
        "w_400,h_300,c_fill,q_auto:best,f_auto/v17/memories/cake.png"
    )


def test_lightbox_size():
    assert "/upload/w_1600,h_1200,c_fill" in optimized_image_url(IMAGE, *LIGHTBOX_SIZE)


def test_video_poster_frame():
    assert video_poster_url(VIDEO) == "https://res.cloudinary.com/demo/video/upload/so_0/v17/memories/party.jpg"


def test_non_cloudinary_urls_untouched():
    url = "https://cdn.example.com/upload/a.jpg"
    assert optimized_image_url(url) == url
    assert video_poster_url("https://cdn.example.com/a.mp4") == "https://cdn.example.com/a.mp4"
    assert thumbnail_url("") == ""


def test_grid_thumbnail_picks_by_type():
    assert "so_0" in grid_thumbnail_url(VIDEO, is_video=True)
    assert "w_400,h_300" in grid_thumbnail_url(IMAGE, is_video=False)
