# scripts/run_replay.py
# -*- coding: utf-8 -*-
"""
CLI entry for accelerometer replay.
加速度数据回放命令行入口。
"""

import os
import argparse

from motiondetector.diagnostics import setup_logging
from motiondetector.pipeline.replay import MotionReplayPipeline


def parse_args():
    parser = argparse.ArgumentParser(
        description="Replay recorded accelerometer samples through the motion estimator.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--samples",
        type=str,
        required=True,
        help="CSV with x,y,z,timestamp_ms rows. 样本 CSV 路径。",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/motion_config.yaml",
        help="Config file path. 配置文件路径。",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="",
        help="Output states CSV; if empty, use <name>_states.csv. "
             "输出状态 CSV，留空则自动生成 <原名>_states.csv。",
    )
    parser.add_argument(
        "--video",
        type=str,
        default="",
        help="Optional graph video path (.mp4). 可选的曲线视频输出路径。",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    spath = args.samples
    assert os.path.isfile(spath), f"Samples not found: {spath}"

    if args.out:
        out_path = args.out
    else:
        d, n = os.path.split(spath)
        stem, _ = os.path.splitext(n)
        out_path = os.path.join(d, f"{stem}_states.csv")

    pipe = MotionReplayPipeline(args.config)
    setup_logging(pipe.log_level)
    print(f"[INFO] Motion config: {pipe.motion_config}")
    pipe.run_csv(spath, out_csv=out_path, out_video=args.video)
