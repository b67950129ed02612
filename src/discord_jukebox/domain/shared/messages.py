"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Field Validation Errors (templates)
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Track Index Errors
    INVALID_TRACK_INDEX = "`{text}` is not a valid track index"
    EMPTY_TRACK_INDEX = "Please specify a track index."

    # Queue Errors
    QUEUE_EMPTY = "The playback queue is empty. Use the `enqueue` command to add some tracks."
    NOTHING_TO_PLAY = (
        "There's no track in the queue to be played. "
        "Use the `enqueue` command to add some tracks."
    )
    NO_TRACKS_MATCHED = "None of the given track numbers was found."
    TRACK_DOES_NOT_EXIST = "Track #{number} doesn't exist"
    DESTINATION_DOES_NOT_EXIST = "Destination slot #{number} doesn't exist"
    TRACK_ALREADY_PLAYED = "Track #{number} has already been played."
    TRACK_CURRENTLY_PLAYING = "Track #{number} is currently playing."
    NOTHING_TO_STOP = "There's nothing to be stopped."
    NOTHING_TO_PAUSE = "There's nothing to be paused."
    NOTHING_TO_RESUME = "There's nothing to be resumed."
    NOTHING_TO_SEEK = "There's nothing to seek in."

    # Command Errors
    USER_VOICE_CHANNEL_REQUIRED = "You need to be in a voice channel to use this command"
    BOT_VOICE_CHANNEL_REQUIRED = (
        "I need to be in a voice chat to play a track. Use the `join` command to invite me."
    )
    NOT_IN_COMMAND_CHANNEL = "This channel isn't available for bot commands."
    UNKNOWN_COMMAND = "Unknown command `{name}`."
    MISSING_TRACK_REFERENCE = "Please specify an URL or another locator for the track to enqueue."
    MISSING_SELECTION = "Please specify which tracks should be affected."
    MISSING_MOVE_DESTINATION = "Please specify where the tracks should be moved, e.g. `move 3 to 1`."
    INVALID_SEEK_POSITION = "`{text}` is not a valid position. Use seconds or `minutes:seconds`."
    INVALID_QUOTA = "`{text}` is not a valid quota. Use a number or `off`."
    UNKNOWN_HELP_TOPIC = "Unknown help topic: `{topic}`"
    PLAY_TAKES_NO_ARGUMENTS = (
        "`play` (re-)starts the playback. To add tracks to the queue use `+` instead."
    )
    INTERNAL_ERROR = "Internal error: {error}"

    # Resolution Errors
    UNSUPPORTED_REFERENCE = (
        "Failed to interpret `{reference}` as a track reference.\n"
        "Might be from an unsupported provider."
    )
    CULAR_COOKIE_INVALID = "cular cookie is invalid"
    CHART_UNAVAILABLE = "Could not load `{name}`: {error}"
    NO_STREAM_URL_FOR_TRACK = "No stream URL found for {reference}"
    RESOLUTION_FAILED = "Failed to resolve `{reference}`: {error}"

    # Voice / Playback Errors
    GUILD_NOT_FOUND = "Guild {guild_id} is not available."
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel."
    VOICE_CONNECT_TIMEOUT = "Timed out while connecting to the voice channel."
    VOICE_NO_PERMISSION = "I'm not allowed to join that voice channel."
    VOICE_CONNECT_FAILED = "Could not connect to the voice channel: {error}"
    PLAYBACK_START_FAILED = "Failed to start playback: {error}"
    PLAYBACK_ALREADY_STOPPED = "The track is no longer playing."

    # Startup
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    VOICE_MOVE_TIMEOUT = "Timeout moving to channel %s"
    VOICE_CLIENT_ERROR = "Voice client error: %s"
    VOICE_NO_PERMISSION = "No permission to join channel %s"
    VOICE_STALE_CLEANUP = "Cleaning up stale voice client in guild %s"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %s"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_SEEKED = "Seeked to %.1fs in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_NO_CALLBACK = "No track end callback set for guild %s"
    PLAYBACK_CALLBACK_ERROR = "Error in track end callback for guild %s: %s"
    PLAYBACK_STALE_HANDLE = "Ignoring track end of a stale handle in guild %s"
    PLAYBACK_RESTART_FAILED = "Failed to start the next track in guild %s: %s"

    # Track Operations
    TRACK_ENDED = "Track ended in guild %s (error: %s)"
    TRACK_QUEUE_FINISHED = "Reached the end of the queue in guild %s"

    # Queue Operations
    QUEUE_APPENDED = "Appended '%s' at position %s in guild %s"
    QUEUE_REMOVED = "Removed %s entries from the queue in guild %s"
    QUEUE_MOVED = "Moved %s entries to %s in guild %s"
    QUEUE_REVERSED = "Reversed %s entries in guild %s"
    QUEUE_CURSOR_MOVED = "Cursor moved from %s to %s in guild %s"
    QUEUE_QUOTA_CHANGED = "Quota changed to %s in guild %s"
    QUEUE_PROMOTED = "Promoted %s deferred entries (boundary now %s)"

    # Registry
    REGISTRY_PLAYER_CREATED = "Created player for guild %s"
    REGISTRY_SHUTDOWN = "Stopped playback in %s guilds"

    # Output
    OUTPUT_SEND_FAILED = "Failed to send message to channel %s: %s"

    # Resolution
    RESOLVER_CLAIMED = "Resolver %s claimed reference %r"
    RESOLVER_UNCLAIMED = "No resolver claimed reference %r"
    RESOLVER_ITEM_FAILED = "Failed to resolve item of %r: %s"
    ENQUEUE_COMPLETED = "Enqueued %d tracks (%d failures) in guild %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_CACHE_HIT = "Using cached info for %s"
    YTDLP_CACHE_CLEANED = "Removed %d expired yt-dlp cache entries"
    YTDLP_STREAM_REFRESHED = "Refreshed stream URL for %s"

    # Audiotool
    AUDIOTOOL_REQUEST = "GET %s"
    AUDIOTOOL_REQUEST_FAILED = "Audiotool request failed for %s: %r"
    AUDIOTOOL_COOKIE_REFRESHED = "Refreshed cular session cookie"
    AUDIOTOOL_COOKIE_MISSING = "Keep-alive response carried no cular session cookie"
    AUDIOTOOL_KEEP_ALIVE_FAILED = "Audiotool keep-alive failed: %r"
    AUDIOTOOL_KEEP_ALIVE_STARTED = "Audiotool keep-alive started (interval=%ss)"
    AUDIOTOOL_KEEP_ALIVE_STOPPED = "Audiotool keep-alive stopped"

    # Commands
    COMMAND_RECEIVED = "Command %r from %s in guild %s"
    COMMAND_USAGE_ERROR = "Usage error in guild %s: %s"
    COMMAND_EXECUTION_ERROR = "Command failed in guild %s: %s"
    COMMAND_UNEXPECTED_ERROR = "Unexpected error while handling %r in guild %s"
    COMMAND_REACTION_FAILED = "Failed to add reaction: %s"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord Jukebox in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized successfully"
    BOT_CONTAINER_INIT_FAILED = "Failed to initialize container: %s"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    BOT_GUILD_AVAILABLE = "Guild available: %s (%s)"
    BOT_GREETING_FAILED = "Failed to greet guild %s: %s"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in text channels.
    """

    # Lifecycle
    GREETING_READY = "Ready to party! 🎵🕺🎶"
    GREETING_JOINED = "Hello my friends! Stay a while and listen!"

    # Queue feedback
    NOW_PLAYING = "Now playing: {caption}\n{page_url}"
    REMOVED_TRACKS = "Removed {count} track(s) from the queue."
    MOVED_TRACKS = "Moved {count} track(s)."
    REVERSED_TRACKS = "Reversed {count} track(s)."
    QUEUE_HEADER = "Current queue:"
    QUEUE_MORE = "`  ...:` (and {count} more track(s))"
    QUEUE_END_CURRENT = "`▶ END:` (you've reached the end of the queue) `◀`"
    QUEUE_END = "`  END:` (you've reached the end of the queue)"
    QUEUE_FINISHED = "That's all, folks! The queue has reached its end."
    NO_CURRENT_TRACK = "There's no current track. Use the `enqueue` command to add some tracks."
    UNKNOWN_DURATION = "Could not determine the track's duration."
    UNKNOWN_POSITION = "Could not determine the track's current state."

    # Quota
    QUOTA_OFF = "Quota is _off_. Users are allowed to enqueue as many tracks as they like."
    QUOTA_ON = (
        "Quota is _on_. Each user is allowed to enqueue up to {quota} track(s) "
        "until other users will be given a higher priority."
    )

    # Wait estimates
    WHEN_QUEUE_END = "The queue will end in {duration}{unsure}"
    WHEN_TRACK = "Track #{number} will start in {duration}{unsure}"
    WHEN_UNSURE = " (or later because some tracks have an unknown length)"

    # Errors
    ERROR_PREFIX = "🚫 {message}"
