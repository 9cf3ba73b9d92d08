from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Video:
    name: str
    video_url: str
    vtt_urls: dict[str, str] = field(default_factory=dict)
    srt_urls: dict[str, str] = field(default_factory=dict)
    txt_urls: dict[str, str] = field(default_factory=dict)
    transcript: str = ""
    # VTT languages first, then SRT; duplicates across formats are kept
    available_languages: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "videoUrl": self.video_url,
            "vttUrls": dict(self.vtt_urls),
            "srtUrls": dict(self.srt_urls),
            "txtUrls": dict(self.txt_urls),
            "transcript": self.transcript,
            "availableLanguages": list(self.available_languages),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Video":
        return cls(
            name=data["name"],
            video_url=data["videoUrl"],
            vtt_urls=dict(data.get("vttUrls") or {}),
            srt_urls=dict(data.get("srtUrls") or {}),
            txt_urls=dict(data.get("txtUrls") or {}),
            transcript=data.get("transcript") or "",
            available_languages=list(data.get("availableLanguages") or []),
        )


@dataclass
class Course:
    name: str
    path: str
    videos: list[Video] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "videos": [v.to_dict() for v in self.videos],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Course":
        return cls(
            name=data["name"],
            path=data.get("path") or f"{data['name']}/",
            videos=[Video.from_dict(v) for v in data.get("videos") or []],
        )


@dataclass
class CacheEntry:
    courses: list[Course]
    generated_at: float  # clock reading, not wall time
    from_snapshot: bool = False


@dataclass
class Snapshot:
    generated_at: datetime
    bucket_name: str
    courses: list[Course]
