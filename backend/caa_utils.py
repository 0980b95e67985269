#!/usr/bin/env python3
"""
Cover Art Archive Utilities

Builds Cover Art Archive (CAA) image URLs for releases and release groups.

The Cover Art Archive is a joint project between MusicBrainz and Internet Archive
that provides cover art for music releases. The catalog never calls the CAA
service: every stored image URL is a fixed template over the entity MBID, so
clients resolve the image themselves.

API Documentation: https://musicbrainz.org/doc/Cover_Art_Archive/API
"""

BASE_URL = 'https://coverartarchive.org'

# Thumbnail size appended to every front-cover URL (250, 500 or 1200)
FRONT_IMAGE_SIZE = 500


def release_url(mbid: str) -> str:
    """
    Front cover URL for a release.

    Args:
        mbid: MusicBrainz release ID

    Returns:
        e.g. https://coverartarchive.org/release/<mbid>/front-500
    """
    return f"{BASE_URL}/release/{mbid}/front-{FRONT_IMAGE_SIZE}"


def release_group_url(mbid: str) -> str:
    """
    Front cover URL for a release group.

    Args:
        mbid: MusicBrainz release group ID

    Returns:
        e.g. https://coverartarchive.org/release-group/<mbid>/front-500
    """
    return f"{BASE_URL}/release-group/{mbid}/front-{FRONT_IMAGE_SIZE}"
