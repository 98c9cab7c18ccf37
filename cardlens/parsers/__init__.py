from cardlens.parsers.detection_response import parse_detection_response

__all__ = ["parse_detection_response"]
