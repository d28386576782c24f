from thumbs.pipeline import run_pipeline
from thumbs.viz import Visualizer


def test_show_thumbnails_grid(make_image):
    sources = [make_image(f"img{i}.jpg", 200, 100, seed=i) for i in range(7)]
    result = run_pipeline(sources)

    fig = Visualizer.show_thumbnails(result.written, ncols=3, show=False)
    axes = fig.get_axes()
    assert len(axes) == 9
    assert [ax.get_title() for ax in axes[:7]] == [f"img{i}_thumb.jpg" for i in range(7)]
    assert len(axes[0].get_images()) == 1
    assert len(axes[8].get_images()) == 0
