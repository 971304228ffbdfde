"""
탐지 파라미터, 장식 배치 기하 및 색상 팔레트 (단일 소스)
"""
# Haar cascade 탐지 파라미터 (고정값)
DETECTION_SCALE_FACTOR = 1.3
DETECTION_MIN_NEIGHBORS = 3
DETECTION_MIN_SIZE = (80, 80)

# 컬러 원 지름 = 얼굴 폭 - COLOR_DOT_SHRINK
COLOR_DOT_SHRINK = 18

# 마스크 배치 여백 (좌우 / 상하, px)
MASK_OFFSET_X = 40
MASK_OFFSET_Y = 70

# 얼굴 위에 칠하는 원 색상 (RGB)
COLOR_PALETTE = [
    (230, 57, 70),    # 빨강
    (29, 53, 87),     # 남색
    (69, 123, 157),   # 청회색
    (244, 162, 97),   # 주황
    (233, 196, 106),  # 노랑
    (42, 157, 143),   # 청록
    (131, 56, 236),   # 보라
    (255, 0, 110),    # 마젠타
]

# 디버그용 얼굴 박스 색상 (RGB)
DEBUG_BOX_COLOR = (255, 0, 0)
