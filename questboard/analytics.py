"""Analytics module for sending quest completion metrics to Datadog.

Each completion produces two series in one request:
- questboard.quest_completed: COUNT of 1, tagged by difficulty and category
- questboard.xp_awarded: COUNT of the XP the quest paid out, same tags

Sending is fail-open: errors are logged and never interrupt the quest flow.
"""

import logging
import time

import requests

logger = logging.getLogger(__name__)

DATADOG_API_URL = "https://api.datadoghq.com/api/v1/series"
COMPLETED_METRIC = "questboard.quest_completed"
XP_METRIC = "questboard.xp_awarded"


def build_completion_series(quest, timestamp: int) -> list:
    """Build the Datadog series for one completed quest.
    
    Args:
        quest: The completed Quest (difficulty, category and xp_reward are used)
        timestamp: Unix timestamp for the data points
    
    Returns:
        List of series dicts ready for the "series" payload key
    """
    tags = [f"difficulty:{quest.difficulty}", f"category:{quest.category}"]
    return [
        {
            "metric": COMPLETED_METRIC,
            "type": "count",
            "points": [[timestamp, 1]],
            "tags": tags
        },
        {
            "metric": XP_METRIC,
            "type": "count",
            "points": [[timestamp, quest.xp_reward]],
            "tags": list(tags)
        },
    ]


def send_quest_metric(quest, datadog_api_key: str) -> bool:
    """Report a quest completion to Datadog.
    
    Args:
        quest: The completed Quest
        datadog_api_key: Datadog API key for authentication
        
    Returns:
        True if the series were accepted, False otherwise
    """
    label = f"'{quest.title}' ({quest.difficulty}/{quest.category})"
    try:
        payload = {"series": build_completion_series(quest, int(time.time()))}
        headers = {
            "Content-Type": "application/json",
            "DD-API-KEY": datadog_api_key
        }
        
        response = requests.post(
            DATADOG_API_URL,
            json=payload,
            headers=headers,
            timeout=5
        )
        response.raise_for_status()
        
        logger.info(f"Sent completion metrics for quest {label}, {quest.xp_reward} XP")
        return True
        
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to send Datadog metrics for quest {label}: {e}")
        return False
    except Exception as e:
        logger.error(f"Unexpected error sending Datadog metrics for quest {label}: {e}")
        return False
