"""Configuration management for the Planar Layer Compositor"""

import os
import json

from constants import DEFAULT_SEGMENTS_X, DEFAULT_SEGMENTS_Y, DEFAULT_TOOL, TOOL_NAMES
from utils.logger import loggerRaise


class ConfigMixin:
	"""Configuration file operations and recent image files

	Expects the host class to define config_dir, config_file and
	max_recent_files before calling _load_config().
	"""

	def _init_config_defaults(self):
		self.recent_files = []
		self.last_tool = DEFAULT_TOOL
		self.default_segments = (DEFAULT_SEGMENTS_X, DEFAULT_SEGMENTS_Y)

	def _load_config(self):
		"""Load recent files and settings from config file"""
		self._init_config_defaults()
		try:
			if os.path.exists(self.config_file):
				with open(self.config_file, 'r', encoding='utf-8') as f:
					config = json.load(f)
				# Filter out files that no longer exist
				self.recent_files = [f for f in config.get('recent_files', []) if os.path.exists(f)]
				self.recent_files = self.recent_files[:self.max_recent_files]

				tool = config.get('last_tool', DEFAULT_TOOL)
				self.last_tool = tool if tool in TOOL_NAMES else DEFAULT_TOOL

				segments = config.get('default_segments')
				if (isinstance(segments, (list, tuple)) and len(segments) == 2
						and all(isinstance(s, int) and s >= 1 for s in segments)):
					self.default_segments = (segments[0], segments[1])
		except Exception as e:
			loggerRaise(e, "Error loading config")

	def _save_config(self):
		"""Save recent files and settings to config file"""
		try:
			# Create config directory if it doesn't exist
			os.makedirs(self.config_dir, exist_ok=True)

			config = {
				'recent_files': self.recent_files[:self.max_recent_files],
				'last_tool': self.last_tool,
				'default_segments': list(self.default_segments),
			}

			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except Exception as e:
			loggerRaise(e, "Error saving config")

	def _add_to_recent_files(self, filepath):
		"""Add a file to the recent files list"""
		# Remove if already in list
		if filepath in self.recent_files:
			self.recent_files.remove(filepath)

		# Add to front of list
		self.recent_files.insert(0, filepath)

		# Trim to max size
		self.recent_files = self.recent_files[:self.max_recent_files]

		# Update menu
		if hasattr(self, 'recent_menu'):
			self._update_recent_files_menu()

		self._save_config()

	def _update_recent_files_menu(self):
		"""Update the Recent Images submenu"""
		self.recent_menu.clear()

		if not self.recent_files:
			no_recent = self.recent_menu.addAction("No recent images")
			no_recent.setEnabled(False)
		else:
			for filepath in self.recent_files:
				if os.path.exists(filepath):
					filename = os.path.basename(filepath)
					action = self.recent_menu.addAction(filename)
					action.setToolTip(filepath)
					# Use lambda with default argument to capture filepath
					action.triggered.connect(lambda checked, f=filepath: self._open_recent_file(f))

			self.recent_menu.addSeparator()
			clear_action = self.recent_menu.addAction("Clear Recent Images")
			clear_action.triggered.connect(self._clear_recent_files)

	def _clear_recent_files(self):
		"""Clear the recent files list"""
		self.recent_files = []
		if hasattr(self, 'recent_menu'):
			self._update_recent_files_menu()
		self._save_config()

	def _open_recent_file(self, filepath):
		"""Import an image from the recent files list"""
		from PyQt5.QtWidgets import QMessageBox

		if not os.path.exists(filepath):
			QMessageBox.warning(self, "File Not Found", f"The file no longer exists:\n{filepath}")
			self.recent_files.remove(filepath)
			if hasattr(self, 'recent_menu'):
				self._update_recent_files_menu()
			self._save_config()
			return

		self.import_images([filepath])

	def _remember_tool(self, tool):
		"""Persist the active tool so the next session starts with it"""
		self.last_tool = tool
		self._save_config()
