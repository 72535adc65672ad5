# scripts/make_samples.py
# -*- coding: utf-8 -*-
"""
Write a synthetic still -> moving -> still sample CSV.
生成 静止 -> 运动 -> 静止 的合成样本 CSV。

Usage / 用法示例：
    python scripts/make_samples.py --out data/drive.csv
    python scripts/run_replay.py --samples data/drive.csv --video data/drive.mp4
"""

import os
import argparse

import numpy as np

from motiondetector.pipeline.synthetic import drive_scenario


def make_samples(out_csv: str, step_ms: int = 50) -> None:
    """
    Generate the drive scenario and save it as CSV.
    生成驾驶场景样本并保存为 CSV。

    Args:
        out_csv (str): Output path. 输出路径。
        step_ms (int): Sampling period in ms. 采样周期（毫秒）。
    """
    samples, spans = drive_scenario(step_ms)

    out_dir = os.path.dirname(out_csv)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    np.savetxt(
        out_csv,
        samples,
        delimiter=",",
        header="x,y,z,timestamp_ms",
        comments="",
        fmt=["%.6f", "%.6f", "%.6f", "%d"],
    )
    print(f"[OK] Saved {len(samples)} samples: {out_csv}  (motion spans={spans})")


def parse_args():
    parser = argparse.ArgumentParser(
        description="Generate synthetic accelerometer samples. 生成合成加速度样本。",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--out",
        type=str,
        required=True,
        help="Output CSV path. 输出 CSV 路径。",
    )
    parser.add_argument(
        "--step-ms",
        type=int,
        default=50,
        help="Sampling period in ms. 采样周期（毫秒）。",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    make_samples(args.out, args.step_ms)
