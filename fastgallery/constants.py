# Constants for the fastgallery engine

# Recognised media files, compared case-insensitively
IMAGE_EXTS = frozenset({'.jpg', '.jpeg', '.heic', '.png', '.gif', '.tif', '.tiff', '.cr2', '.raw', '.arw'})
VIDEO_EXTS = frozenset({'.mp4', '.mov', '.3gp', '.avi', '.mts', '.m4v', '.mpg'})

# Reserved gallery subdirectories
THUMBNAIL_DIR = '_thumbnail'
FULLSIZE_DIR = '_fullsize'
ORIGINAL_DIR = '_original'

# Output formats
IMAGE_EXTENSION = '.jpg'
VIDEO_EXTENSION = '.mp4'
JPEG_QUALITY = 85

# Permissions for created gallery entries
DIRECTORY_MODE = 0o755
FILE_MODE = 0o644

# Media sizes (pixels)
THUMBNAIL_WIDTH = 280
THUMBNAIL_HEIGHT = 210
FULLSIZE_MAX_WIDTH = 1920
FULLSIZE_MAX_HEIGHT = 1080
VIDEO_MAX_SIZE = 640

# Web assets written into the gallery
HTML_FILE = 'index.html'
MANIFEST_FILE = 'manifest.json'
BACK_ICON = 'back.svg'
FOLDER_ICON = 'folder.svg'

# Upper bound of queued jobs per directory
QUEUE_SIZE = 10000

# Worker threads when not given on the command line
MAX_DEFAULT_CONCURRENCY = 4
