from ftir_touchpad.models import TouchPadConfig
from ftir_touchpad.pipeline import detect_touches
from ftir_touchpad.synthetic import SyntheticTouchConfig, generate_touch_frame


def main() -> None:
    synthetic = generate_touch_frame(
        SyntheticTouchConfig(
            blobs=(
                (180.0, 200.0, 22.0, 22.0, 0.0),
                (420.0, 260.0, 30.0, 18.0, 35.0),
            ),
            scenario="edge_bleed",
            seed=7,
        )
    )

    result = detect_touches(synthetic.frame, TouchPadConfig(threshold_value=120, padding_pixels=24))

    print("FTIR touch detection")
    print(f"Contours: {result.contour_count} (skipped {result.skipped_contours})")
    for index, ellipse in enumerate(result.ellipses, start=1):
        print(
            f"Touch {index}: center=({ellipse.center_x:.1f}, {ellipse.center_y:.1f}) "
            f"axes={ellipse.major_axis:.1f}x{ellipse.minor_axis:.1f} "
            f"angle={ellipse.angle_rad:.2f} rad"
        )


if __name__ == "__main__":
    main()
