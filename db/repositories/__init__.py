"""Repository layer for the contact loader.

Provides query and write methods for the tables a loader touches:
- campaign_contacts: delete_for_campaign, bulk_insert, list_for_campaign,
                     count_for_campaign
- organizations: get_by_id, get_campaign, get_for_campaign, set_feature
- jobs: get_by_id, create, mark_running, finish
- zip_codes: get_timezone_by_zip
"""
